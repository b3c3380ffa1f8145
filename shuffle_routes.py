"""
Shuffle Flask Blueprint — 셔플 증명 엔드포인트
================================================

  GET  /shuffle/params   생성자 요약
  POST /shuffle/prove    {"input", "output", "label"?} → 증명 세션
  POST /shuffle/verify   증명 세션 (+ "label"?) → {"valid"}
  GET  /shuffle/latest   마지막 증명 세션
  POST /shuffle/clear    저장된 세션 삭제

잘못된 입력(ValueError)은 400, 백엔드 오류(R1CSError)는 500 JSON 응답.
검증 실패는 오류가 아니다: 200 {"valid": false}.
"""

import logging

from flask import Blueprint, jsonify, request

from zkp.bulletproofs.generators import BulletproofGens, PedersenGens
from zkp.bulletproofs.transcript import Transcript
from zkp.shuffle import MalformedProofError, R1CSError, ShuffleProof

from shuffle_serializers import (
    deserialize_fr_list,
    deserialize_session,
    point_short,
    serialize_point,
    serialize_session,
)

logger = logging.getLogger(__name__)

shuffle_bp = Blueprint('shuffle', __name__, url_prefix='/shuffle')

# 저장소와 설정은 app.py에서 주입
STORE = None
CONFIG = None
GENS = None

LATEST_KEY = "shuffle.latest"
LATEST_VERIFY_KEY = "shuffle.latest.verify"


def init_shuffle_bp(store, config):
    """app.py에서 저장소와 설정을 주입받는다."""
    global STORE, CONFIG, GENS
    STORE = store
    CONFIG = config
    GENS = None


def get_gens():
    """(PedersenGens, BulletproofGens). 처음 요청될 때 한 번만 만든다."""
    global GENS
    if GENS is None:
        logger.info("generators: capacity=%d", CONFIG.gens_capacity)
        GENS = (PedersenGens(), BulletproofGens(CONFIG.gens_capacity))
    return GENS


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValueError("JSON 객체 본문이 필요합니다")
    return body


def _field(body, key):
    if key not in body:
        raise ValueError(f"필드가 없습니다: {key}")
    return body[key]


def _transcript_label(body):
    label = body.get("label", CONFIG.transcript_label)
    if not isinstance(label, str) or not label:
        raise ValueError("label은 비어 있지 않은 문자열이어야 합니다")
    return label


# ─── 오류 응답 ───

@shuffle_bp.errorhandler(ValueError)
@shuffle_bp.errorhandler(MalformedProofError)
def handle_value_error(exc):
    logger.warning("rejected request %s: %s", request.path, exc)
    return jsonify({"error": str(exc), "type": type(exc).__name__}), 400


@shuffle_bp.errorhandler(R1CSError)
def handle_r1cs_error(exc):
    logger.error("backend error %s: %s", request.path, exc)
    return jsonify({"error": str(exc), "type": type(exc).__name__}), 500


# ─── 엔드포인트 ───

@shuffle_bp.route("/params")
def params():
    """공개 파라미터 요약."""
    pc_gens, bp_gens = get_gens()
    return jsonify({
        "transcript_label": CONFIG.transcript_label,
        "capacity": bp_gens.capacity,
        "B": serialize_point(pc_gens.B),
        "B_blinding": serialize_point(pc_gens.B_blinding),
        "B_blinding_short": point_short(pc_gens.B_blinding),
    })


@shuffle_bp.route("/prove", methods=["POST"])
def prove():
    body = _json_body()
    input_values = deserialize_fr_list(_field(body, "input"))
    output_values = deserialize_fr_list(_field(body, "output"))
    label = _transcript_label(body)

    pc_gens, bp_gens = get_gens()
    proof, input_commitments, output_commitments = ShuffleProof.prove(
        pc_gens, bp_gens, Transcript(label.encode()), input_values, output_values,
    )

    session = serialize_session(proof, input_commitments, output_commitments, label)
    STORE.set(LATEST_KEY, session)
    STORE.remove(LATEST_VERIFY_KEY)
    logger.info("shuffle proof created: k=%d, %d bytes", session["k"], proof.serialized_size())
    return jsonify(session)


@shuffle_bp.route("/verify", methods=["POST"])
def verify():
    body = _json_body()
    proof, input_commitments, output_commitments = deserialize_session(body)
    label = _transcript_label(body)

    pc_gens, bp_gens = get_gens()
    valid = proof.verify(
        pc_gens, bp_gens, Transcript(label.encode()), input_commitments, output_commitments,
    )

    STORE.set(LATEST_VERIFY_KEY, {"valid": valid})
    logger.info("shuffle proof verified: k=%d, valid=%s", len(input_commitments), valid)
    return jsonify({"valid": valid})


@shuffle_bp.route("/latest")
def latest():
    """마지막 증명 세션과 (있으면) 마지막 검증 결과."""
    session = STORE.get(LATEST_KEY)
    if session is None:
        return jsonify({"error": "저장된 증명이 없습니다"}), 404
    return jsonify({"session": session, "verify": STORE.get(LATEST_VERIFY_KEY)})


@shuffle_bp.route("/clear", methods=["POST"])
def clear():
    STORE.remove_prefix("shuffle.")
    return jsonify({"cleared": True})
