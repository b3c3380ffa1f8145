"""
R1CS 제약 시스템 — Prover / Verifier 공통 인터페이스
======================================================

가젯(gadget)은 이 인터페이스만 보고 작성된다. Prover(할당값 있음)와
Verifier(할당값 없음)가 완전히 같은 순서로 같은 연산을 받으므로,
양쪽이 동일한 제약 그래프와 동일한 챌린지를 얻는다.

**제약의 형태**:
  n개의 곱셈 게이트:   a_L[i] · a_R[i] = a_O[i]
  q개의 선형 제약:     Σ (W_L·a_L + W_R·a_R + W_O·a_O + W_V·v + c) = 0

**2단계(commit → challenge → constrain) 상태 기계**:

  ┌────────────┐  randomize()  ┌────────────┐  prove()/verify()  ┌─────────────┐
  │ COMMITTING │ ────────────▶ │ CHALLENGED │ ─────────────────▶ │ CONSTRAINED │
  └────────────┘               └────────────┘                    └─────────────┘
        │                      prove()/verify()                         ▲
        └───────────────────────────────────────────────────────────────┘

  - COMMITTING: commit, multiply, allocate_multiplier, constrain
  - CHALLENGED: challenge_scalar, multiply, allocate_multiplier, constrain
  - CONSTRAINED: 아무 연산도 불가
  randomize()는 phase 1을 닫는다: 커밋먼트 수 m과 phase 1 곱셈 게이트의
  커밋먼트 A_I1, A_O1, S1을 트랜스크립트에 넣은 다음에야 챌린지를 뽑을 수
  있다. 따라서 챌린지에 맞춰 입력을 고르는 Prover는 존재할 수 없다.

**제약 평탄화 (flattening)**:
  챌린지 z로 q개의 선형 제약을 하나로 합친다:
    Σ_q z^(q+1) · lc_q = 0
  이를 변수 종류별 가중치 벡터 w_L, w_R, w_O, w_V와 상수 w_c로 정리하면
    <w_L, a_L> + <w_R, a_R> + <w_O, a_O> = <w_V, v> + w_c
"""

import logging
from enum import Enum

from zkp.bulletproofs.errors import PhaseError
from zkp.bulletproofs.field import FR
from zkp.bulletproofs.r1cs.linear_combination import (
    LinearCombination, Variable, VariableKind,
)

logger = logging.getLogger(__name__)


class Phase(Enum):
    COMMITTING = "committing"
    CHALLENGED = "challenged"
    CONSTRAINED = "constrained"


class ConstraintSystem:
    """Prover와 Verifier가 공유하는 제약 그래프 구성 로직.

    서브클래스가 구현하는 훅:
        _assign_multiplier(left, right): 곱셈 게이트의 할당값 기록 (Prover만)
        _assign_allocated(assignment): allocate_multiplier의 할당값 기록 (Prover만)
        _phase1_commitments(): (A_I1, A_O1, S1)

    속성:
        transcript: Fiat-Shamir 트랜스크립트 (이 세션이 단독 소유)
        phase: 현재 Phase
        constraints: LinearCombination 리스트 (각각 == 0)
        num_multipliers: 할당된 곱셈 게이트 수
        num_committed: 커밋된 값의 수
        phase1_multipliers: phase 1을 닫을 때의 곱셈 게이트 수
    """

    def __init__(self, transcript):
        self.transcript = transcript
        self.transcript.append_message(b"dom-sep", b"r1cs v1")
        self.phase = Phase.COMMITTING
        self.constraints = []
        self.num_multipliers = 0
        self.num_committed = 0
        self.phase1_multipliers = None

    # ── 상태 기계 ──

    def _require_phase(self, operation, *allowed):
        if self.phase not in allowed:
            raise PhaseError(
                f"{operation}: {self.phase.name} 단계에서는 허용되지 않습니다"
            )

    def _close_phase1(self):
        self.phase1_multipliers = self.num_multipliers
        self.transcript.append_u64(b"m", self.num_committed)
        A_I1, A_O1, S1 = self._phase1_commitments()
        self.transcript.append_point(b"A_I1", A_I1)
        self.transcript.append_point(b"A_O1", A_O1)
        self.transcript.append_point(b"S1", S1)

    def randomize(self):
        """COMMITTING → CHALLENGED.

        phase 1을 닫고 이후 challenge_scalar()를 허용한다.
        이 시점 이후에는 commit()이 PhaseError를 낸다.
        """
        self._require_phase("randomize", Phase.COMMITTING)
        self._close_phase1()
        self.transcript.append_message(b"dom-sep", b"r1cs-randomized")
        self.phase = Phase.CHALLENGED
        logger.debug(
            "randomized phase: m=%d, phase1 multipliers=%d",
            self.num_committed, self.phase1_multipliers,
        )

    def challenge_scalar(self, label):
        """트랜스크립트에서 챌린지 스칼라를 뽑는다 (CHALLENGED 단계 전용)."""
        self._require_phase("challenge_scalar", Phase.CHALLENGED)
        return self.transcript.challenge_scalar(label)

    def _finalize(self):
        self._require_phase("finalize", Phase.COMMITTING, Phase.CHALLENGED)
        if self.phase is Phase.COMMITTING:
            self._close_phase1()
        self.phase = Phase.CONSTRAINED

    # ── 제약 구성 ──

    def _commit_variable(self):
        self._require_phase("commit", Phase.COMMITTING)
        var = Variable(VariableKind.COMMITTED, self.num_committed)
        self.num_committed += 1
        return var

    def multiply(self, left, right):
        """곱셈 게이트 하나를 추가한다.

        left, right 선형결합을 새 게이트의 입력 변수에 묶는 제약 두 개도
        함께 추가된다.

        Args:
            left, right: Variable, LinearCombination, int 또는 FR

        Returns:
            (left_var, right_var, output_var)
        """
        self._require_phase("multiply", Phase.COMMITTING, Phase.CHALLENGED)
        left = LinearCombination.coerce(left)
        right = LinearCombination.coerce(right)

        self._assign_multiplier(left, right)
        l_var, r_var, o_var = self._new_multiplier()

        self.constraints.append(left - l_var)
        self.constraints.append(right - r_var)
        return l_var, r_var, o_var

    def allocate_multiplier(self, assignment=None):
        """입력이 아직 어떤 제약에도 묶이지 않은 곱셈 게이트를 할당한다.

        Args:
            assignment: Prover는 (left, right) 값 쌍, Verifier는 None

        Returns:
            (left_var, right_var, output_var)
        """
        self._require_phase("allocate_multiplier", Phase.COMMITTING, Phase.CHALLENGED)
        self._assign_allocated(assignment)
        return self._new_multiplier()

    def constrain(self, lc):
        """lc == 0 제약을 추가한다."""
        self._require_phase("constrain", Phase.COMMITTING, Phase.CHALLENGED)
        self.constraints.append(LinearCombination.coerce(lc))

    def _new_multiplier(self):
        i = self.num_multipliers
        self.num_multipliers += 1
        return (
            Variable(VariableKind.MULTIPLIER_LEFT, i),
            Variable(VariableKind.MULTIPLIER_RIGHT, i),
            Variable(VariableKind.MULTIPLIER_OUTPUT, i),
        )

    # ── 평탄화 ──

    def flattened_constraints(self, z):
        """선형 제약들을 z의 거듭제곱으로 합친다.

        Args:
            z: 챌린지 스칼라

        Returns:
            (wL, wR, wO, wV, wc):
              wL, wR, wO: 길이 n의 FR 리스트
              wV: 길이 m의 FR 리스트
              wc: FR
        """
        n = self.num_multipliers
        m = self.num_committed
        wL = [FR(0)] * n
        wR = [FR(0)] * n
        wO = [FR(0)] * n
        wV = [FR(0)] * m
        wc = FR(0)

        exp_z = z
        for lc in self.constraints:
            for var, coeff in lc.terms:
                weight = exp_z * coeff
                if var.kind is VariableKind.MULTIPLIER_LEFT:
                    wL[var.index] = wL[var.index] + weight
                elif var.kind is VariableKind.MULTIPLIER_RIGHT:
                    wR[var.index] = wR[var.index] + weight
                elif var.kind is VariableKind.MULTIPLIER_OUTPUT:
                    wO[var.index] = wO[var.index] + weight
                elif var.kind is VariableKind.COMMITTED:
                    wV[var.index] = wV[var.index] - weight
                else:
                    wc = wc - weight
            exp_z = exp_z * z

        return wL, wR, wO, wV, wc

    # ── 서브클래스 훅 ──

    def _assign_multiplier(self, left, right):
        raise NotImplementedError

    def _assign_allocated(self, assignment):
        raise NotImplementedError

    def _phase1_commitments(self):
        raise NotImplementedError
