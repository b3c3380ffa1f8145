"""
R1CS Verifier
=============

커밋먼트만 들고 Prover와 같은 제약 그래프를 재구성한 뒤 증명을 확인한다.

**검증 방정식**:

  0. A_I1, A_O1, S1, T₁, T₃..T₆ 중 항등원이 있으면 거부
     (A_I2, A_O2, S2는 phase 2 게이트가 없을 때 항등원이다)

  1. t(x) 다항식 항등식
     t_x·B + t_x_blinding·B_blinding
       == x²·(<wV, V> + (wc + δ)·B) + x·T₁ + x³·T₃ + x⁴·T₄ + x⁵·T₅ + x⁶·T₆
     where δ = <y⁻ⁿ∘wR, wL>

  2. 내적 논증
     P = x·A_I + x²·A_O + x³·S
         + Σ (x·y⁻ⁱ·wRᵢ)·G'ᵢ + Σ (x·wLᵢ + wOᵢ - yⁱ)·H'ᵢ
         - e_blinding·B_blinding + t_x·Q
     (A_I = A_I1 + u·A_I2, A_O, S도 같다)
     InnerProductProof.verify(Q, G', H', P)

  어느 쪽이 실패했는지는 반환값으로 드러내지 않고 DEBUG 로그로만 남긴다.
"""

import logging

from zkp.bulletproofs.field import (
    FR, ec_mul, ec_eq, inner_product, is_identity, multiscalar_mul,
    next_power_of_two, scalar_powers,
)
from zkp.bulletproofs.r1cs.constraint_system import ConstraintSystem
from zkp.bulletproofs.r1cs.prover import generator_factors

logger = logging.getLogger(__name__)

NONZERO_POINTS = ("A_I1", "A_O1", "S1", "T_1", "T_3", "T_4", "T_5", "T_6")


class Verifier(ConstraintSystem):
    """할당값 없이 제약 그래프를 재구성하는 제약 시스템.

    randomize() 시점에 Prover의 phase 1 커밋먼트를 트랜스크립트에 넣어야
    하므로 증명을 생성 시점에 받는다.

    Args:
        pc_gens: PedersenGens
        bp_gens: BulletproofGens
        transcript: Prover와 같은 레이블로 초기화한 Transcript
        proof: R1CSProof
    """

    def __init__(self, pc_gens, bp_gens, transcript, proof):
        super().__init__(transcript)
        self.pc_gens = pc_gens
        self.bp_gens = bp_gens
        self.proof = proof
        self.V = []

    def commit(self, commitment):
        """Prover가 보낸 커밋먼트에 대응하는 변수를 할당한다."""
        var = self._commit_variable()
        self.V.append(commitment)
        self.transcript.append_point(b"V", commitment)
        return var

    def _assign_multiplier(self, left, right):
        pass

    def _assign_allocated(self, assignment):
        pass

    def _phase1_commitments(self):
        return self.proof.A_I1, self.proof.A_O1, self.proof.S1

    def verify(self):
        """증명을 확인한다.

        Returns:
            bool: 증명이 재구성한 제약 그래프에 대해 유효하면 True

        Raises:
            PhaseError: 이미 verify()를 호출한 경우
            InsufficientGeneratorsError: 패딩된 곱셈 수가 생성자 용량보다 클 때
        """
        self._finalize()
        proof = self.proof

        n = self.num_multipliers
        n1 = self.phase1_multipliers
        padded_n = next_power_of_two(n)
        G = self.bp_gens.G(padded_n)
        H = self.bp_gens.H(padded_n)
        logger.debug(
            "R1CS verify: m=%d, multipliers=%d (phase1=%d), padded=%d",
            self.num_committed, n, n1, padded_n,
        )

        for name in NONZERO_POINTS:
            if is_identity(getattr(proof, name)):
                logger.debug("R1CS verify failed: %s is the identity", name)
                return False

        self.transcript.append_point(b"A_I2", proof.A_I2)
        self.transcript.append_point(b"A_O2", proof.A_O2)
        self.transcript.append_point(b"S2", proof.S2)

        y = self.transcript.challenge_scalar(b"y")
        z = self.transcript.challenge_scalar(b"z")

        self.transcript.append_point(b"T_1", proof.T_1)
        self.transcript.append_point(b"T_3", proof.T_3)
        self.transcript.append_point(b"T_4", proof.T_4)
        self.transcript.append_point(b"T_5", proof.T_5)
        self.transcript.append_point(b"T_6", proof.T_6)

        u = self.transcript.challenge_scalar(b"u")
        x = self.transcript.challenge_scalar(b"x")

        self.transcript.append_scalar(b"t_x", proof.t_x)
        self.transcript.append_scalar(b"t_x_blinding", proof.t_x_blinding)
        self.transcript.append_scalar(b"e_blinding", proof.e_blinding)

        w = self.transcript.challenge_scalar(b"w")
        Q = ec_mul(self.pc_gens.B, w)

        wL, wR, wO, wV, wc = self.flattened_constraints(z)
        y_pows = scalar_powers(y, padded_n)
        y_inv_pows = scalar_powers(FR(1) / y, padded_n)
        x_pows = scalar_powers(x, 7)

        y_inv_wR = [y_inv_pows[i] * wR[i] for i in range(n)]
        delta = inner_product(y_inv_wR, wL)

        # 1. t(x) 항등식
        lhs = self.pc_gens.commit(proof.t_x, proof.t_x_blinding)
        rhs = multiscalar_mul(
            [wV_j * x_pows[2] for wV_j in wV]
            + [(wc + delta) * x_pows[2], x_pows[1], x_pows[3], x_pows[4], x_pows[5], x_pows[6]],
            self.V + [self.pc_gens.B, proof.T_1, proof.T_3, proof.T_4, proof.T_5, proof.T_6],
        )
        if not ec_eq(lhs, rhs):
            logger.debug("R1CS verify failed: t(x) polynomial check")
            return False

        # 2. 내적 논증
        G_factors, H_factors = generator_factors(n1, padded_n, u, y_inv_pows)
        G_scaled = [ec_mul(G[i], G_factors[i]) for i in range(padded_n)]
        H_scaled = [ec_mul(H[i], H_factors[i]) for i in range(padded_n)]

        g_scalars = [x * y_inv_wR[i] for i in range(n)] + [FR(0)] * (padded_n - n)
        h_scalars = (
            [x * wL[i] + wO[i] - y_pows[i] for i in range(n)]
            + [-y_pows[i] for i in range(n, padded_n)]
        )

        x_sq = x_pows[2]
        x_cu = x_pows[3]
        P = multiscalar_mul(
            [x, x * u, x_sq, x_sq * u, x_cu, x_cu * u, -proof.e_blinding, proof.t_x * w]
            + g_scalars + h_scalars,
            [proof.A_I1, proof.A_I2, proof.A_O1, proof.A_O2, proof.S1, proof.S2,
             self.pc_gens.B_blinding, self.pc_gens.B]
            + G_scaled + H_scaled,
        )

        if not proof.ipp_proof.verify(self.transcript, Q, G_scaled, H_scaled, P):
            logger.debug("R1CS verify failed: inner product argument")
            return False
        return True
