"""
셔플 증명 Flask 앱
==================

  flask --app app run
  flask --app app generate-proof 3,1,2 1,2,3 --out-dir out/

generate-proof는 생성자와 증명을 out-dir에 JSON으로 쓰고, 다시 읽어서
검증한 결과를 출력한다.
"""

import json
import logging
from pathlib import Path

import click
from flask import Flask

from config import ShuffleConfig
from shuffle_routes import init_shuffle_bp, shuffle_bp
from shuffle_serializers import (
    deserialize_bp_gens,
    deserialize_pc_gens,
    deserialize_session,
    serialize_bp_gens,
    serialize_pc_gens,
    serialize_session,
)
from shuffle_store import ShuffleStore
from zkp.bulletproofs.generators import BulletproofGens, PedersenGens
from zkp.bulletproofs.transcript import Transcript
from zkp.shuffle import ShuffleProof

logger = logging.getLogger(__name__)


def parse_values(text):
    """"3,1,2" → [3, 1, 2]"""
    try:
        return [int(v) for v in text.split(",") if v.strip()]
    except ValueError as exc:
        raise click.BadParameter(f"쉼표로 구분한 정수여야 합니다: {text!r}") from exc


def write_json(path, data):
    path.write_text(json.dumps(data, indent=2))


def read_json(path):
    return json.loads(path.read_text())


def create_app(config=None):
    config = config or ShuffleConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config["SHUFFLE"] = config

    store = ShuffleStore(config.storage_path)
    app.extensions["shuffle_store"] = store
    init_shuffle_bp(store, config)
    app.register_blueprint(shuffle_bp)

    @app.route("/")
    def index():
        return {
            "name": "shuffle-proof",
            "endpoints": ["/shuffle/params", "/shuffle/prove", "/shuffle/verify",
                          "/shuffle/latest", "/shuffle/clear"],
        }

    @app.cli.command("generate-proof")
    @click.argument("input_values", metavar="INPUT")
    @click.argument("output_values", metavar="OUTPUT")
    @click.option("--out-dir", type=click.Path(file_okay=False, path_type=Path),
                  default=Path("."), show_default=True)
    @click.option("--capacity", type=int, default=None,
                  help="BulletproofGens 용량 (기본: 설정값)")
    def generate_proof(input_values, output_values, out_dir, capacity):
        """INPUT이 OUTPUT의 순열이라는 셔플 증명을 만들고 검증한다."""
        input_list = parse_values(input_values)
        output_list = parse_values(output_values)
        capacity = capacity or config.gens_capacity
        label = config.label_bytes

        pc_gens = PedersenGens()
        bp_gens = BulletproofGens(capacity)
        try:
            proof, input_commitments, output_commitments = ShuffleProof.prove(
                pc_gens, bp_gens, Transcript(label), input_list, output_list,
            )
        except ValueError as exc:
            raise click.UsageError(str(exc)) from exc

        out_dir.mkdir(parents=True, exist_ok=True)
        write_json(out_dir / "pc_gens.json", serialize_pc_gens(pc_gens))
        write_json(out_dir / "bp_gens.json", serialize_bp_gens(bp_gens))
        write_json(out_dir / "proof.json", serialize_session(
            proof, input_commitments, output_commitments, config.transcript_label,
        ))
        click.echo(f"proof written to {out_dir} ({proof.serialized_size()} bytes)")

        # 파일에서 다시 읽어 검증
        pc_gens = deserialize_pc_gens(read_json(out_dir / "pc_gens.json"))
        bp_gens = deserialize_bp_gens(read_json(out_dir / "bp_gens.json"))
        proof, input_commitments, output_commitments = deserialize_session(
            read_json(out_dir / "proof.json")
        )
        valid = proof.verify(
            pc_gens, bp_gens, Transcript(label), input_commitments, output_commitments,
        )
        click.echo(f"verified: {valid}")
        if not valid:
            raise click.exceptions.Exit(1)

    return app
