"""
Bulletproofs R1CS 테스트.

테스트 대상:
  - Variable / LinearCombination 연산자
  - 상태 기계: COMMITTING → CHALLENGED → CONSTRAINED, PhaseError
  - 제약 평탄화
  - Prover/Verifier 왕복: 선형 제약, 곱셈, allocate_multiplier, 2단계 제약
  - 오류: 생성자 용량 부족, 할당값 누락, 잘못된 증명 바이트열
"""

import pytest

from zkp.bulletproofs.errors import (
    InsufficientGeneratorsError, MalformedProofError, MissingAssignmentError,
    PhaseError,
)
from zkp.bulletproofs.field import FR, Z1, ec_eq, is_identity, random_scalar
from zkp.bulletproofs.generators import BulletproofGens
from zkp.bulletproofs.r1cs import (
    LinearCombination, Phase, Prover, R1CSProof, Variable, VariableKind, Verifier,
)
from zkp.bulletproofs.transcript import Transcript


LABEL = b"R1CSTest"


def prove_and_verify(pc_gens, bp_gens, values, build, verify_label=LABEL):
    """values를 커밋하고 양쪽에 build(cs, vars)를 적용해 증명/검증한다."""
    prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
    commitments, prover_vars = [], []
    for v in values:
        C, var = prover.commit(v, random_scalar())
        commitments.append(C)
        prover_vars.append(var)
    build(prover, prover_vars)
    proof = prover.prove()

    verifier = Verifier(pc_gens, bp_gens, Transcript(verify_label), proof)
    verifier_vars = [verifier.commit(C) for C in commitments]
    build(verifier, verifier_vars)
    return proof, verifier.verify()


# ─────────────────────────────────────────────────────────────────────
# 선형결합
# ─────────────────────────────────────────────────────────────────────

class TestLinearCombination:

    def test_variable_minus_scalar(self):
        x = Variable(VariableKind.COMMITTED, 0)
        lc = x - FR(5)
        assert lc.terms == [(x, FR(1)), (Variable.one(), FR(-5))]

    def test_scalar_multiplication(self):
        x = Variable(VariableKind.COMMITTED, 0)
        lc = x * FR(3) + 2 * x
        assert [c for _, c in lc.terms] == [FR(3), FR(2)]

    def test_int_on_left(self):
        x = Variable(VariableKind.MULTIPLIER_OUTPUT, 1)
        lc = 7 - x
        assert lc.terms == [(Variable.one(), FR(7)), (x, FR(-1))]

    def test_negation(self):
        x = Variable(VariableKind.MULTIPLIER_LEFT, 0)
        assert (-(x + 1)).terms == [(x, FR(-1)), (Variable.one(), FR(-1))]

    def test_coerce(self):
        lc = LinearCombination.coerce(4)
        assert lc.terms == [(Variable.one(), FR(4))]
        assert LinearCombination.coerce(lc) is lc

    def test_variable_equality(self):
        assert Variable(VariableKind.COMMITTED, 2) == Variable(VariableKind.COMMITTED, 2)
        assert Variable(VariableKind.COMMITTED, 2) != Variable(VariableKind.MULTIPLIER_LEFT, 2)
        assert len({Variable.one(), Variable.one()}) == 1


# ─────────────────────────────────────────────────────────────────────
# 상태 기계
# ─────────────────────────────────────────────────────────────────────

class TestPhases:

    def test_initial_phase(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        assert prover.phase is Phase.COMMITTING

    def test_randomize_transitions(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        prover.commit(1, 2)
        prover.randomize()
        assert prover.phase is Phase.CHALLENGED
        assert prover.phase1_multipliers == 0

    def test_challenge_before_randomize(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        with pytest.raises(PhaseError):
            prover.challenge_scalar(b"z")

    def test_commit_after_randomize(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        prover.randomize()
        with pytest.raises(PhaseError):
            prover.commit(1, 2)

    def test_randomize_twice(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        prover.randomize()
        with pytest.raises(PhaseError):
            prover.randomize()

    def test_operations_after_prove(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        _, x = prover.commit(3, 1)
        prover.constrain(x - 3)
        prover.prove()
        assert prover.phase is Phase.CONSTRAINED
        with pytest.raises(PhaseError):
            prover.prove()
        with pytest.raises(PhaseError):
            prover.constrain(x - 3)
        with pytest.raises(PhaseError):
            prover.multiply(x, x)

    def test_verifier_commit_after_randomize(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        proof = prover.prove()
        verifier = Verifier(pc_gens, bp_gens, Transcript(LABEL), proof)
        verifier.randomize()
        with pytest.raises(PhaseError):
            verifier.commit(pc_gens.commit(1, 1))

    def test_challenges_match_between_roles(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        V, _ = prover.commit(5, 9)
        prover.randomize()
        z_prover = prover.challenge_scalar(b"z")
        proof = prover.prove()

        verifier = Verifier(pc_gens, bp_gens, Transcript(LABEL), proof)
        verifier.commit(V)
        verifier.randomize()
        assert verifier.challenge_scalar(b"z") == z_prover


# ─────────────────────────────────────────────────────────────────────
# 평탄화
# ─────────────────────────────────────────────────────────────────────

class TestFlattening:

    def test_weights(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        _, v = prover.commit(6, 1)
        # 제약 0, 1: multiply가 추가하는 입력 묶음 (v - l, 2 - r)
        _, _, o = prover.multiply(v, LinearCombination.coerce(2))
        # 제약 2: o - 12
        prover.constrain(o - 12)

        z = FR(5)
        wL, wR, wO, wV, wc = prover.flattened_constraints(z)
        assert wL == [FR(-5)]
        assert wR == [FR(-25)]
        assert wO == [FR(125)]
        assert wV == [FR(-5)]
        assert wc == FR(12 * 125 - 2 * 25)

    def test_satisfied_assignment(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        _, a = prover.commit(3, 1)
        _, b = prover.commit(4, 1)
        _, _, o = prover.multiply(a, b)
        prover.constrain(o - 12)

        wL, wR, wO, wV, wc = prover.flattened_constraints(FR(7))
        lhs = (
            sum((w * x for w, x in zip(wL, prover.a_L)), FR(0))
            + sum((w * x for w, x in zip(wR, prover.a_R)), FR(0))
            + sum((w * x for w, x in zip(wO, prover.a_O)), FR(0))
        )
        rhs = sum((w * x for w, x in zip(wV, prover.v)), FR(0)) + wc
        assert lhs == rhs


# ─────────────────────────────────────────────────────────────────────
# 증명 왕복
# ─────────────────────────────────────────────────────────────────────

class TestProveVerify:

    def test_linear_constraint_only(self, pc_gens, bp_gens):
        _, valid = prove_and_verify(pc_gens, bp_gens, [5, 5], lambda cs, v: cs.constrain(v[1] - v[0]))
        assert valid is True

    def test_linear_constraint_violated(self, pc_gens, bp_gens):
        _, valid = prove_and_verify(pc_gens, bp_gens, [5, 6], lambda cs, v: cs.constrain(v[1] - v[0]))
        assert valid is False

    def test_no_constraints(self, pc_gens, bp_gens):
        proof, valid = prove_and_verify(pc_gens, bp_gens, [], lambda cs, v: None)
        assert valid is True
        assert not is_identity(proof.A_I1)
        assert is_identity(proof.A_I2)

    @staticmethod
    def _product(cs, v):
        _, _, o = cs.multiply(v[0], v[1])
        cs.constrain(o - v[2])

    def test_multiplication(self, pc_gens, bp_gens):
        proof, valid = prove_and_verify(pc_gens, bp_gens, [3, 4, 12], self._product)
        assert valid is True
        assert is_identity(proof.A_I2) and is_identity(proof.S2)

    def test_multiplication_violated(self, pc_gens, bp_gens):
        _, valid = prove_and_verify(pc_gens, bp_gens, [3, 4, 13], self._product)
        assert valid is False

    def test_multiplication_with_padding(self, pc_gens, bp_gens):
        # 게이트 3개 → 패딩 4
        def build(cs, v):
            _, _, ab = cs.multiply(v[0], v[1])
            _, _, abc = cs.multiply(ab, v[2])
            _, _, sq = cs.multiply(abc, abc)
            cs.constrain(sq - v[3])

        _, valid = prove_and_verify(pc_gens, bp_gens, [2, 3, 5, 900], build)
        assert valid is True

    def test_allocate_multiplier(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        _, _, o = prover.allocate_multiplier((FR(3), FR(5)))
        prover.constrain(o - 15)
        proof = prover.prove()

        verifier = Verifier(pc_gens, bp_gens, Transcript(LABEL), proof)
        _, _, o = verifier.allocate_multiplier()
        verifier.constrain(o - 15)
        assert verifier.verify() is True

    def test_allocate_multiplier_without_assignment(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        with pytest.raises(MissingAssignmentError):
            prover.allocate_multiplier()

    @staticmethod
    def _two_phase(cs, v):
        # phase 1: a·b = c
        _, _, o1 = cs.multiply(v[0], v[1])
        cs.constrain(o1 - v[2])
        cs.randomize()
        z = cs.challenge_scalar(b"z")
        # phase 2: (a - z)(b - z) = c - z(a + b) + z²
        _, _, o2 = cs.multiply(v[0] - z, v[1] - z)
        cs.constrain(o2 - v[2] + v[0] * z + v[1] * z - z * z)

    def test_two_phase_constraints(self, pc_gens, bp_gens):
        proof, valid = prove_and_verify(pc_gens, bp_gens, [2, 3, 6], self._two_phase)
        assert valid is True
        assert not is_identity(proof.A_I1)
        assert not is_identity(proof.A_I2)

    def test_two_phase_constraints_violated(self, pc_gens, bp_gens):
        _, valid = prove_and_verify(pc_gens, bp_gens, [2, 3, 7], self._two_phase)
        assert valid is False

    def test_wrong_transcript_label(self, pc_gens, bp_gens):
        _, valid = prove_and_verify(pc_gens, bp_gens, [3, 4, 12], self._product, verify_label=b"other")
        assert valid is False

    def test_wrong_commitment(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        V, x = prover.commit(7, random_scalar())
        prover.constrain(x - 7)
        proof = prover.prove()

        verifier = Verifier(pc_gens, bp_gens, Transcript(LABEL), proof)
        x = verifier.commit(pc_gens.commit(7, random_scalar()))
        verifier.constrain(x - 7)
        assert verifier.verify() is False

    @pytest.mark.parametrize("name", ["A_I1", "A_O1", "S1", "T_1", "T_3", "T_4", "T_5", "T_6"])
    def test_identity_point_rejected(self, pc_gens, bp_gens, name):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        commitments = [prover.commit(v, random_scalar()) for v in (3, 4, 12)]
        self._product(prover, [var for _, var in commitments])
        proof = prover.prove()
        forged = R1CSProof(**dict(vars(proof), **{name: Z1}))

        verifier = Verifier(pc_gens, bp_gens, Transcript(LABEL), forged)
        self._product(verifier, [verifier.commit(C) for C, _ in commitments])
        assert verifier.verify() is False

    def test_identity_point_rejected_after_serialization(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        commitments = [prover.commit(v, random_scalar()) for v in (3, 4, 12)]
        self._product(prover, [var for _, var in commitments])
        data = bytearray(prover.prove().to_bytes())
        # T_1은 일곱 번째 점
        data[6 * 64:7 * 64] = b"\x00" * 64
        forged = R1CSProof.from_bytes(bytes(data))

        verifier = Verifier(pc_gens, bp_gens, Transcript(LABEL), forged)
        self._product(verifier, [verifier.commit(C) for C, _ in commitments])
        assert verifier.verify() is False


# ─────────────────────────────────────────────────────────────────────
# 오류
# ─────────────────────────────────────────────────────────────────────

class TestErrors:

    @staticmethod
    def _three_gates(cs, v):
        for _ in range(3):
            cs.multiply(v[0], v[0])

    def test_insufficient_generators_on_prove(self, pc_gens):
        small = BulletproofGens(2)
        with pytest.raises(InsufficientGeneratorsError):
            prove_and_verify(pc_gens, small, [1], self._three_gates)

    def test_insufficient_generators_on_verify(self, pc_gens, bp_gens):
        prover = Prover(pc_gens, bp_gens, Transcript(LABEL))
        V, x = prover.commit(1, 1)
        self._three_gates(prover, [x])
        proof = prover.prove()

        verifier = Verifier(pc_gens, BulletproofGens(2), Transcript(LABEL), proof)
        self._three_gates(verifier, [verifier.commit(V)])
        with pytest.raises(InsufficientGeneratorsError):
            verifier.verify()


@pytest.fixture(scope="module")
def two_phase_proof(pc_gens, bp_gens):
    proof, valid = prove_and_verify(pc_gens, bp_gens, [2, 3, 6], TestProveVerify._two_phase)
    assert valid
    return proof


class TestR1CSProofSerialization:

    def test_roundtrip(self, two_phase_proof):
        data = two_phase_proof.to_bytes()
        assert len(data) == two_phase_proof.serialized_size()
        restored = R1CSProof.from_bytes(data)
        assert restored.to_bytes() == data
        assert ec_eq(restored.T_1, two_phase_proof.T_1)
        assert restored.t_x == two_phase_proof.t_x

    def test_too_short(self, two_phase_proof):
        with pytest.raises(MalformedProofError):
            R1CSProof.from_bytes(two_phase_proof.to_bytes()[:100])

    def test_point_off_curve(self, two_phase_proof):
        data = bytearray(two_phase_proof.to_bytes())
        data[63] ^= 1
        with pytest.raises(MalformedProofError):
            R1CSProof.from_bytes(bytes(data))

    def test_trailing_byte(self, two_phase_proof):
        with pytest.raises(MalformedProofError):
            R1CSProof.from_bytes(two_phase_proof.to_bytes() + b"\x00")
