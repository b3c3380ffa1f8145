"""
셔플 증명 프로토콜
==================

**Prover 흐름**:
  1. 길이 검사 (LengthMismatchError)
  2. 트랜스크립트에 dom-sep "ShuffleProof", k 추가
  3. 각 입력/출력 값을 새 블라인딩으로 커밋 (순서 유지)
  4. shuffle_gadget(prover, input_vars, output_vars)
  5. prover.prove() → R1CSProof

**Verifier 흐름**:
  1. 길이 검사 (증명 유효성과 무관하게 예외)
  2. 같은 dom-sep, k
  3. 같은 순서로 커밋먼트 등록
  4. shuffle_gadget(verifier, input_vars, output_vars)
  5. verifier.verify() → bool

커밋먼트 순서는 트랜스크립트에 그대로 반영되므로 Verifier는 prove()가
돌려준 순서 그대로 커밋먼트를 넣어야 한다.

사용 예시:
    >>> pc_gens, bp_gens = PedersenGens(), BulletproofGens(16)
    >>> proof, in_comms, out_comms = ShuffleProof.prove(
    ...     pc_gens, bp_gens, Transcript(b"ShuffleProofTest"), [3, 1, 2], [1, 2, 3])
    >>> proof.verify(pc_gens, bp_gens, Transcript(b"ShuffleProofTest"), in_comms, out_comms)
    True
"""

import logging

from zkp.bulletproofs.field import FR, random_scalar
from zkp.bulletproofs.r1cs import Prover, R1CSProof, Verifier
from zkp.shuffle.errors import check_lengths
from zkp.shuffle.gadget import shuffle_gadget

logger = logging.getLogger(__name__)


DOMAIN_SEPARATOR = b"ShuffleProof"


def _bind_statement(transcript, k):
    transcript.append_message(b"dom-sep", DOMAIN_SEPARATOR)
    transcript.append_scalar(b"k", FR(k))


class ShuffleProof:
    """두 커밋먼트 수열이 서로의 순열임을 보이는 증명.

    속성:
        proof: R1CSProof
    """

    def __init__(self, proof):
        self.proof = proof

    @classmethod
    def prove(cls, pc_gens, bp_gens, transcript, input, output):
        """셔플 증명을 생성한다.

        Args:
            pc_gens: PedersenGens
            bp_gens: BulletproofGens (2(k-1)개 게이트의 패딩 크기 이상)
            transcript: 이 증명 전용 Transcript (상태가 진행됨)
            input: 비밀 입력 값 리스트 (int 또는 FR)
            output: 비밀 출력 값 리스트 (int 또는 FR)

        Returns:
            (ShuffleProof, input_commitments, output_commitments)

        Raises:
            LengthMismatchError: 길이가 다르거나 비어 있을 때
            InsufficientGeneratorsError: 생성자 용량이 부족할 때
        """
        k = check_lengths(len(input), len(output))
        _bind_statement(transcript, k)

        prover = Prover(pc_gens, bp_gens, transcript)

        input_commitments, input_vars = [], []
        for value in input:
            commitment, var = prover.commit(value, random_scalar())
            input_commitments.append(commitment)
            input_vars.append(var)

        output_commitments, output_vars = [], []
        for value in output:
            commitment, var = prover.commit(value, random_scalar())
            output_commitments.append(commitment)
            output_vars.append(var)

        shuffle_gadget(prover, input_vars, output_vars)
        proof = prover.prove()
        logger.debug("shuffle proof created: k=%d", k)

        return cls(proof), input_commitments, output_commitments

    def verify(self, pc_gens, bp_gens, transcript, input_commitments, output_commitments):
        """셔플 증명을 검증한다.

        Args:
            pc_gens, bp_gens: Prover와 같은 생성자
            transcript: Prover와 같은 레이블로 새로 만든 Transcript
            input_commitments, output_commitments: prove()가 돌려준 순서 그대로

        Returns:
            bool: 증명이 유효하면 True

        Raises:
            LengthMismatchError: 커밋먼트 수가 다르거나 비어 있을 때
        """
        k = check_lengths(len(input_commitments), len(output_commitments))
        _bind_statement(transcript, k)

        verifier = Verifier(pc_gens, bp_gens, transcript, self.proof)
        input_vars = [verifier.commit(C) for C in input_commitments]
        output_vars = [verifier.commit(C) for C in output_commitments]

        shuffle_gadget(verifier, input_vars, output_vars)
        valid = verifier.verify()
        logger.debug("shuffle proof verified: k=%d, valid=%s", k, valid)
        return valid

    def serialized_size(self):
        return self.proof.serialized_size()

    def to_bytes(self):
        return self.proof.to_bytes()

    @classmethod
    def from_bytes(cls, data):
        """Raises: MalformedProofError"""
        return cls(R1CSProof.from_bytes(data))
