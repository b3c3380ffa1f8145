"""
셔플 증명 데이터 직렬화/역직렬화 헬퍼
======================================

JSON(TinyDB, HTTP 응답, CLI 출력 파일)에 담을 수 있는 형태로 변환한다.
FR, G1 점, PedersenGens, BulletproofGens, ShuffleProof, 증명 세션.

역직렬화 함수는 형식이 잘못된 입력에 ValueError를 낸다.
"""

from zkp.bulletproofs.field import (
    FR, POINT_BYTES, point_from_bytes, to_affine,
)
from zkp.bulletproofs.generators import BulletproofGens, PedersenGens
from zkp.shuffle import ShuffleProof


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) 또는 int → FR"""
    if isinstance(s, bool) or not isinstance(s, (str, int)):
        raise ValueError(f"스칼라는 정수 또는 정수 문자열이어야 합니다: {s!r}")
    return FR(int(s))


def deserialize_fr_list(data):
    """list[str | int] → list[FR]"""
    if not isinstance(data, list):
        raise ValueError("스칼라 리스트가 필요합니다")
    return [deserialize_fr(s) for s in data]


# ─── G1 point ───

def serialize_point(point):
    """G1 point → [str, str], 항등원은 None"""
    affine = to_affine(point)
    if affine is None:
        return None
    return [str(affine[0]), str(affine[1])]


def _coordinate(value):
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"좌표는 정수 또는 정수 문자열이어야 합니다: {value!r}")
    return int(value)


def deserialize_point(data):
    """[str, str] or None → G1 point (곡선 위의 점인지 확인)"""
    if data is None:
        return point_from_bytes(b"\x00" * POINT_BYTES)
    if not isinstance(data, list) or len(data) != 2:
        raise ValueError(f"점은 [x, y] 형식이어야 합니다: {data!r}")
    x, y = _coordinate(data[0]), _coordinate(data[1])
    if x < 0 or y < 0:
        raise ValueError("좌표는 음수일 수 없습니다")
    try:
        raw = x.to_bytes(32, "big") + y.to_bytes(32, "big")
    except OverflowError as exc:
        raise ValueError("좌표가 너무 큽니다") from exc
    return point_from_bytes(raw)


def serialize_point_list(points):
    return [serialize_point(p) for p in points]


def deserialize_point_list(data):
    if not isinstance(data, list):
        raise ValueError("점 리스트가 필요합니다")
    return [deserialize_point(p) for p in data]


# ─── Generators ───

def serialize_pc_gens(pc_gens):
    """PedersenGens → dict"""
    return {
        "B": serialize_point(pc_gens.B),
        "B_blinding": serialize_point(pc_gens.B_blinding),
    }


def deserialize_pc_gens(data):
    """dict → PedersenGens"""
    return PedersenGens(
        B=deserialize_point(data["B"]),
        B_blinding=deserialize_point(data["B_blinding"]),
    )


def serialize_bp_gens(bp_gens):
    """BulletproofGens → dict"""
    return {
        "capacity": bp_gens.capacity,
        "G_vec": serialize_point_list(bp_gens.G_vec),
        "H_vec": serialize_point_list(bp_gens.H_vec),
    }


def deserialize_bp_gens(data):
    """dict → BulletproofGens"""
    return BulletproofGens(
        data["capacity"],
        G_vec=deserialize_point_list(data["G_vec"]),
        H_vec=deserialize_point_list(data["H_vec"]),
    )


# ─── Proof ───

def serialize_proof(proof):
    """ShuffleProof → hex string of to_bytes()"""
    return proof.to_bytes().hex()


def deserialize_proof(hex_str):
    """hex string → ShuffleProof

    Raises:
        ValueError: hex가 아니거나 MalformedProofError
    """
    if not isinstance(hex_str, str):
        raise ValueError("증명은 hex 문자열이어야 합니다")
    return ShuffleProof.from_bytes(bytes.fromhex(hex_str))


# ─── Session ───

def serialize_session(proof, input_commitments, output_commitments, label=None):
    """prove() 결과 → dict (HTTP 응답, 저장소 레코드, proof.json 공용)"""
    data = {
        "k": len(input_commitments),
        "proof": serialize_proof(proof),
        "input_commitments": serialize_point_list(input_commitments),
        "output_commitments": serialize_point_list(output_commitments),
    }
    if label is not None:
        data["label"] = label
    return data


def deserialize_session(data):
    """dict → (ShuffleProof, input_commitments, output_commitments)"""
    if not isinstance(data, dict):
        raise ValueError("JSON 객체가 필요합니다")
    try:
        return (
            deserialize_proof(data["proof"]),
            deserialize_point_list(data["input_commitments"]),
            deserialize_point_list(data["output_commitments"]),
        )
    except KeyError as exc:
        raise ValueError(f"필드가 없습니다: {exc.args[0]}") from exc


# ─── display helpers ───

def point_short(point):
    """G1 point → 축약 문자열 (로그/요약 표시용)"""
    affine = to_affine(point)
    if affine is None:
        return "∞"

    def shorten(s):
        if len(s) <= 8:
            return s
        return s[:4] + "..." + s[-4:]
    return f"({shorten(str(affine[0]))}, {shorten(str(affine[1]))})"
