"""
R1CS 증명 객체와 바이트 직렬화
================================

**구성** (점 11개 + 스칼라 3개 + 내적 증명):
  | 필드                | 의미                                      |
  |---------------------|-------------------------------------------|
  | A_I1, A_O1, S1      | phase 1 곱셈 게이트 커밋먼트              |
  | A_I2, A_O2, S2      | phase 2 곱셈 게이트 커밋먼트 (없으면 항등원) |
  | T_1, T_3, ..., T_6  | t(x) 계수 커밋먼트 (t₂는 보내지 않음)     |
  | t_x, t_x_blinding   | t(x) 값과 그 블라인딩                      |
  | e_blinding          | A_I, A_O, S 블라인딩의 x 결합             |
  | ipp_proof           | l(x), r(x)에 대한 내적 논증               |

**바이트 형식**:
  points(11 × 64) || scalars(3 × 32) || ipp_proof
"""

from zkp.bulletproofs.errors import MalformedProofError
from zkp.bulletproofs.field import (
    POINT_BYTES, SCALAR_BYTES,
    point_from_bytes, point_to_bytes, scalar_from_bytes, scalar_to_bytes,
)
from zkp.bulletproofs.inner_product import InnerProductProof


POINT_FIELDS = (
    "A_I1", "A_O1", "S1",
    "A_I2", "A_O2", "S2",
    "T_1", "T_3", "T_4", "T_5", "T_6",
)
SCALAR_FIELDS = ("t_x", "t_x_blinding", "e_blinding")

HEADER_BYTES = len(POINT_FIELDS) * POINT_BYTES + len(SCALAR_FIELDS) * SCALAR_BYTES


class R1CSProof:
    """Prover.prove()가 만드는 R1CS 증명. 생성 후 변경하지 않는다."""

    def __init__(self, A_I1, A_O1, S1, A_I2, A_O2, S2,
                 T_1, T_3, T_4, T_5, T_6,
                 t_x, t_x_blinding, e_blinding, ipp_proof):
        self.A_I1 = A_I1
        self.A_O1 = A_O1
        self.S1 = S1
        self.A_I2 = A_I2
        self.A_O2 = A_O2
        self.S2 = S2
        self.T_1 = T_1
        self.T_3 = T_3
        self.T_4 = T_4
        self.T_5 = T_5
        self.T_6 = T_6
        self.t_x = t_x
        self.t_x_blinding = t_x_blinding
        self.e_blinding = e_blinding
        self.ipp_proof = ipp_proof

    def serialized_size(self):
        return HEADER_BYTES + self.ipp_proof.serialized_size()

    def to_bytes(self):
        out = bytearray()
        for name in POINT_FIELDS:
            out.extend(point_to_bytes(getattr(self, name)))
        for name in SCALAR_FIELDS:
            out.extend(scalar_to_bytes(getattr(self, name)))
        out.extend(self.ipp_proof.to_bytes())
        return bytes(out)

    @classmethod
    def from_bytes(cls, data):
        """to_bytes()의 역변환.

        Raises:
            MalformedProofError: 길이, 점, 스칼라 중 하나라도 올바르지 않을 때
        """
        data = bytes(data)
        if len(data) < HEADER_BYTES:
            raise MalformedProofError(f"증명이 너무 짧습니다: {len(data)} bytes")

        fields = {}
        pos = 0
        try:
            for name in POINT_FIELDS:
                fields[name] = point_from_bytes(data[pos:pos + POINT_BYTES])
                pos += POINT_BYTES
            for name in SCALAR_FIELDS:
                fields[name] = scalar_from_bytes(data[pos:pos + SCALAR_BYTES])
                pos += SCALAR_BYTES
        except ValueError as exc:
            raise MalformedProofError(str(exc)) from exc

        fields["ipp_proof"] = InnerProductProof.from_bytes(data[pos:])
        return cls(**fields)
