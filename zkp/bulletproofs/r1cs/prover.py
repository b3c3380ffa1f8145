"""
R1CS Prover
===========

할당값(비밀 값)을 들고 제약 그래프를 구성한 뒤 R1CSProof를 만든다.

**증명 생성 단계** (prove()):

  Round 1: A_I2, A_O2, S2 (phase 2 곱셈 게이트가 없으면 항등원)
           → 챌린지 y, z
  Round 2: 제약 평탄화로 wL, wR, wO, wV, wc 계산
           l(x) = l₁·x + l₂·x² + l₃·x³
           r(x) = r₀ + r₁·x + r₃·x³
             l₁ = a_L + y⁻ⁿ∘wR      l₂ = a_O      l₃ = s_L
             r₀ = wO - yⁿ           r₁ = yⁿ∘a_R + wL      r₃ = yⁿ∘s_R
           t(x) = <l(x), r(x)> 의 계수 t₁..t₆에 대한 커밋먼트 T₁, T₃..T₆
           → 챌린지 u, x
  Round 3: t_x, t_x_blinding, e_blinding
           → 챌린지 w, Q = w·B
  Round 4: 패딩된 l, r과 스케일된 생성자로 내적 논증

  t₂ = <wV, v> + wc + δ(y, z) 는 제약이 만족될 때만 성립하며,
  T₂는 보내지 않는다. Verifier가 커밋먼트 V로부터 직접 재구성한다.

**phase 2 생성자 스케일링**:
  phase 2 게이트의 G, H 생성자에는 챌린지 u가 곱해진다.
  A_I = A_I1 + u·A_I2 처럼 두 phase의 커밋먼트가 하나로 합쳐진다.
"""

import logging

from zkp.bulletproofs.errors import MissingAssignmentError
from zkp.bulletproofs.field import (
    FR, Z1, ec_mul, inner_product, multiscalar_mul, next_power_of_two,
    random_scalar, scalar_powers, to_fr,
)
from zkp.bulletproofs.inner_product import InnerProductProof
from zkp.bulletproofs.r1cs.constraint_system import ConstraintSystem
from zkp.bulletproofs.r1cs.linear_combination import VariableKind
from zkp.bulletproofs.r1cs.proof import R1CSProof

logger = logging.getLogger(__name__)


class Prover(ConstraintSystem):
    """비밀 할당값을 가진 제약 시스템.

    Args:
        pc_gens: PedersenGens
        bp_gens: BulletproofGens
        transcript: 이 세션이 단독으로 소유하는 Transcript
    """

    def __init__(self, pc_gens, bp_gens, transcript):
        super().__init__(transcript)
        self.pc_gens = pc_gens
        self.bp_gens = bp_gens

        self.v = []
        self.v_blinding = []
        self.a_L = []
        self.a_R = []
        self.a_O = []

        self._phase1_points = None
        self._phase1_secrets = None

    def commit(self, value, blinding):
        """값을 커밋하고 대응하는 변수를 할당한다.

        Args:
            value: 비밀 값 (int 또는 FR)
            blinding: 블라인딩 인자 (int 또는 FR)

        Returns:
            (V, Variable): Pedersen 커밋먼트와 커밋된 변수
        """
        var = self._commit_variable()
        value = to_fr(value)
        blinding = to_fr(blinding)
        V = self.pc_gens.commit(value, blinding)

        self.v.append(value)
        self.v_blinding.append(blinding)
        self.transcript.append_point(b"V", V)
        return V, var

    # ── 할당값 ──

    def eval(self, lc):
        """선형결합을 현재 할당값으로 평가한다."""
        result = FR(0)
        for var, coeff in lc.terms:
            result = result + coeff * self._value_of(var)
        return result

    def _value_of(self, var):
        kind = var.kind
        if kind is VariableKind.ONE:
            return FR(1)
        if kind is VariableKind.COMMITTED:
            return self.v[var.index]
        if kind is VariableKind.MULTIPLIER_LEFT:
            return self.a_L[var.index]
        if kind is VariableKind.MULTIPLIER_RIGHT:
            return self.a_R[var.index]
        return self.a_O[var.index]

    def _assign_multiplier(self, left, right):
        l_val = self.eval(left)
        r_val = self.eval(right)
        self._push_assignment(l_val, r_val)

    def _assign_allocated(self, assignment):
        if assignment is None:
            raise MissingAssignmentError("Prover의 allocate_multiplier에는 (left, right) 값이 필요합니다")
        l_val, r_val = assignment
        self._push_assignment(to_fr(l_val), to_fr(r_val))

    def _push_assignment(self, l_val, r_val):
        self.a_L.append(l_val)
        self.a_R.append(r_val)
        self.a_O.append(l_val * r_val)

    # ── 커밋먼트 ──

    def _commit_gates(self, start, end):
        """[start, end) 범위 게이트의 (A_I, A_O, S)와 비밀 블라인딩.

        범위가 비어 있어도 블라인딩 항 때문에 항등원이 되지 않는다.
        """
        count = end - start
        G = self.bp_gens.G(end)[start:]
        H = self.bp_gens.H(end)[start:]
        B_blinding = self.pc_gens.B_blinding

        i_blinding = random_scalar()
        o_blinding = random_scalar()
        s_blinding = random_scalar()
        s_L = [random_scalar() for _ in range(count)]
        s_R = [random_scalar() for _ in range(count)]

        A_I = multiscalar_mul(
            [i_blinding] + self.a_L[start:end] + self.a_R[start:end],
            [B_blinding] + G + H,
        )
        A_O = multiscalar_mul([o_blinding] + self.a_O[start:end], [B_blinding] + G)
        S = multiscalar_mul([s_blinding] + s_L + s_R, [B_blinding] + G + H)
        return (A_I, A_O, S), (i_blinding, o_blinding, s_blinding, s_L, s_R)

    def _phase1_commitments(self):
        # randomize() 시점의 게이트만 phase 1이다
        # 패딩 크기가 아니라 실제 게이트 수만큼만 생성자가 필요하다
        points, blindings = self._commit_gates(0, self.num_multipliers)
        self._phase1_points = points
        self._phase1_secrets = blindings
        return points

    # ── 증명 생성 ──

    def prove(self):
        """제약 그래프와 할당값으로 R1CSProof를 만든다.

        Prover는 할당값이 제약을 만족하는지 스스로 확인하지 않는다.
        만족하지 않으면 만들어진 증명이 검증에서 거부된다.

        Returns:
            R1CSProof

        Raises:
            PhaseError: 이미 prove()를 호출한 경우
            InsufficientGeneratorsError: 패딩된 곱셈 수가 생성자 용량보다 클 때
        """
        self._finalize()

        n = self.num_multipliers
        n1 = self.phase1_multipliers
        m = self.num_committed
        padded_n = next_power_of_two(n)
        G = self.bp_gens.G(padded_n)
        H = self.bp_gens.H(padded_n)
        logger.debug(
            "R1CS prove: m=%d, multipliers=%d (phase1=%d), padded=%d",
            m, n, n1, padded_n,
        )

        # Round 1
        if n > n1:
            (A_I2, A_O2, S2), phase2_secrets = self._commit_gates(n1, n)
        else:
            (A_I2, A_O2, S2), phase2_secrets = (Z1, Z1, Z1), (FR(0), FR(0), FR(0), [], [])
        i_blinding1, o_blinding1, s_blinding1, s_L1, s_R1 = self._phase1_secrets
        i_blinding2, o_blinding2, s_blinding2, s_L2, s_R2 = phase2_secrets

        self.transcript.append_point(b"A_I2", A_I2)
        self.transcript.append_point(b"A_O2", A_O2)
        self.transcript.append_point(b"S2", S2)

        y = self.transcript.challenge_scalar(b"y")
        z = self.transcript.challenge_scalar(b"z")

        # Round 2
        wL, wR, wO, wV, wc = self.flattened_constraints(z)
        y_pows = scalar_powers(y, padded_n)
        y_inv_pows = scalar_powers(FR(1) / y, padded_n)
        s_L = s_L1 + s_L2
        s_R = s_R1 + s_R2

        l1 = [self.a_L[i] + y_inv_pows[i] * wR[i] for i in range(n)]
        l2 = self.a_O
        l3 = s_L
        r0 = [wO[i] - y_pows[i] for i in range(n)]
        r1 = [y_pows[i] * self.a_R[i] + wL[i] for i in range(n)]
        r3 = [y_pows[i] * s_R[i] for i in range(n)]

        t_poly = {
            1: inner_product(l1, r0),
            3: inner_product(l2, r1) + inner_product(l3, r0),
            4: inner_product(l1, r3) + inner_product(l3, r1),
            5: inner_product(l2, r3),
            6: inner_product(l3, r3),
        }
        tau = {i: random_scalar() for i in t_poly}
        T = {i: self.pc_gens.commit(t_poly[i], tau[i]) for i in t_poly}

        for i in (1, 3, 4, 5, 6):
            self.transcript.append_point(b"T_%d" % i, T[i])

        u = self.transcript.challenge_scalar(b"u")
        x = self.transcript.challenge_scalar(b"x")

        # Round 3
        x_pows = scalar_powers(x, 7)
        t_x_blinding = x_pows[2] * inner_product(wV, self.v_blinding)
        for i in tau:
            t_x_blinding = t_x_blinding + tau[i] * x_pows[i]

        l_vec = [
            l1[i] * x_pows[1] + l2[i] * x_pows[2] + l3[i] * x_pows[3]
            for i in range(n)
        ]
        r_vec = [r0[i] + r1[i] * x_pows[1] + r3[i] * x_pows[3] for i in range(n)]
        t_x = inner_product(l_vec, r_vec)

        i_blinding = i_blinding1 + u * i_blinding2
        o_blinding = o_blinding1 + u * o_blinding2
        s_blinding = s_blinding1 + u * s_blinding2
        e_blinding = x * (i_blinding + x * (o_blinding + x * s_blinding))

        self.transcript.append_scalar(b"t_x", t_x)
        self.transcript.append_scalar(b"t_x_blinding", t_x_blinding)
        self.transcript.append_scalar(b"e_blinding", e_blinding)

        w = self.transcript.challenge_scalar(b"w")
        Q = ec_mul(self.pc_gens.B, w)

        # Round 4
        # 패딩 게이트는 a_L = a_R = a_O = 0 이므로 l은 0, r은 -yⁱ 이다
        l_vec.extend(FR(0) for _ in range(n, padded_n))
        r_vec.extend(-y_pows[i] for i in range(n, padded_n))

        G_factors, H_factors = generator_factors(n1, padded_n, u, y_inv_pows)
        G_scaled = [ec_mul(G[i], G_factors[i]) for i in range(padded_n)]
        H_scaled = [ec_mul(H[i], H_factors[i]) for i in range(padded_n)]

        ipp_proof = InnerProductProof.create(
            self.transcript, Q, G_scaled, H_scaled, l_vec, r_vec,
        )

        A_I1, A_O1, S1 = self._phase1_points
        return R1CSProof(
            A_I1=A_I1, A_O1=A_O1, S1=S1,
            A_I2=A_I2, A_O2=A_O2, S2=S2,
            T_1=T[1], T_3=T[3], T_4=T[4], T_5=T[5], T_6=T[6],
            t_x=t_x, t_x_blinding=t_x_blinding, e_blinding=e_blinding,
            ipp_proof=ipp_proof,
        )


def generator_factors(n1, padded_n, u, y_inv_pows):
    """내적 논증에 쓰는 생성자 스케일 인자.

    G'ᵢ = G_factorsᵢ · Gᵢ,  H'ᵢ = H_factorsᵢ · Hᵢ
      G_factorsᵢ = 1 (i < n1), u (i ≥ n1)
      H_factorsᵢ = y⁻ⁱ · G_factorsᵢ
    """
    G_factors = [FR(1)] * n1 + [u] * (padded_n - n1)
    H_factors = [y_inv_pows[i] * G_factors[i] for i in range(padded_n)]
    return G_factors, H_factors
