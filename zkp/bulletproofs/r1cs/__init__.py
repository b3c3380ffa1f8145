"""
Bulletproofs R1CS 증명 시스템
==============================

  ConstraintSystem ──┬── Prover    (할당값 보유, R1CSProof 생성)
                     └── Verifier  (커밋먼트만 보유, R1CSProof 검증)

가젯은 ConstraintSystem 인터페이스(multiply, allocate_multiplier,
constrain, randomize, challenge_scalar)만 사용해 한 번만 작성하고,
Prover와 Verifier 양쪽에 똑같이 적용한다.
"""

from zkp.bulletproofs.r1cs.constraint_system import ConstraintSystem, Phase
from zkp.bulletproofs.r1cs.linear_combination import (
    LinearCombination, Variable, VariableKind,
)
from zkp.bulletproofs.r1cs.proof import R1CSProof
from zkp.bulletproofs.r1cs.prover import Prover
from zkp.bulletproofs.r1cs.verifier import Verifier
