"""
영지식 셔플 증명 (Proof of Shuffle)
=====================================

두 비밀 수열 중 하나가 다른 하나의 순열이라는 사실을, 값이나 순열을
공개하지 않고 Pedersen 커밋먼트와 증명만으로 보인다.

  gadget.shuffle_gadget  순열 검사 제약 (Prover/Verifier 공용)
  proof.ShuffleProof     prove / verify / 직렬화
"""

from zkp.shuffle.errors import (
    InsufficientGeneratorsError,
    LengthMismatchError,
    MalformedProofError,
    MissingAssignmentError,
    PhaseError,
    R1CSError,
)
from zkp.shuffle.gadget import SHUFFLE_CHALLENGE_LABEL, shuffle_gadget
from zkp.shuffle.proof import DOMAIN_SEPARATOR, ShuffleProof
