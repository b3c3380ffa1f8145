"""셔플 증명 예외. 백엔드 예외도 여기서 함께 가져다 쓸 수 있다."""

from zkp.bulletproofs.errors import (
    InsufficientGeneratorsError,
    MalformedProofError,
    MissingAssignmentError,
    PhaseError,
    R1CSError,
)


class LengthMismatchError(ValueError):
    """입력과 출력의 길이가 다르거나 비어 있을 때.

    트랜스크립트나 제약 시스템을 건드리기 전에 발생하므로,
    호출자는 올바른 입력으로 다시 시도할 수 있다.
    """

    def __init__(self, input_len, output_len):
        self.input_len = input_len
        self.output_len = output_len
        if input_len == output_len:
            message = "셔플 입력이 비어 있습니다 (k ≥ 1 이어야 합니다)"
        else:
            message = f"입력 {input_len}개, 출력 {output_len}개: 길이가 다릅니다"
        super().__init__(message)


def check_lengths(input_len, output_len):
    """len(input) == len(output) ≥ 1 이 아니면 LengthMismatchError."""
    if input_len != output_len or input_len == 0:
        raise LengthMismatchError(input_len, output_len)
    return input_len
