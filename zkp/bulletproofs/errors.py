"""
R1CS 백엔드 예외 계층
=====================

  R1CSError
  ├── PhaseError                  상태 기계 전이 순서 위반 (구조적 오류)
  ├── InsufficientGeneratorsError BulletproofGens 용량 부족
  ├── MissingAssignmentError      Prover가 값 없는 곱셈을 요청함
  └── MalformedProofError         증명 바이트열 디코딩 실패 (ValueError이기도 함)

증명이 단순히 틀린 경우는 예외가 아니다: Verifier.verify()가 False를 반환한다.
"""


class R1CSError(Exception):
    """R1CS 증명 백엔드의 모든 오류의 기반 클래스."""


class PhaseError(R1CSError):
    """COMMITTING → CHALLENGED → CONSTRAINED 순서를 어긴 연산."""


class InsufficientGeneratorsError(R1CSError):
    """곱셈 게이트 수(2의 거듭제곱으로 패딩)가 생성자 용량을 넘을 때."""

    def __init__(self, required, capacity):
        self.required = required
        self.capacity = capacity
        super().__init__(
            f"생성자 {required}개가 필요하지만 용량은 {capacity}개입니다"
        )


class MissingAssignmentError(R1CSError):
    """Prover 쪽 변수에 할당값이 없을 때."""


class MalformedProofError(R1CSError, ValueError):
    """증명 직렬화 형식이 올바르지 않을 때."""
