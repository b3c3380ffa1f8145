"""
Pedersen / Bulletproofs 생성자 (공개 파라미터)
===============================================

**PedersenGens**:
  단일 값 커밋먼트 C = v·B + r·B_blinding 에 쓰이는 두 생성자.
  - B: G1 생성자
  - B_blinding: hash_to_point로 유도한 점 (B에 대한 이산로그를 아무도 모름)
  - 바인딩(binding): log_B(B_blinding)을 모르면 다른 (v, r)로 열 수 없음
  - 하이딩(hiding): r이 균일하면 C는 v에 대해 아무 정보도 주지 않음

**BulletproofGens**:
  벡터 커밋먼트 <a, G> + <b, H> 에 쓰이는 생성자 벡터 G_vec, H_vec.
  곱셈 게이트 수를 2의 거듭제곱으로 패딩한 크기만큼 필요하다.

**신뢰 설정이 없다**:
  PLONK의 SRS와 달리 toxic waste τ가 없다. 모든 생성자는 공개된
  레이블의 해시에서 유도되므로 누구나 같은 값을 재계산할 수 있다.
  생성 후에는 변경 경로가 없고, 여러 세션이 동시에 공유해도 안전하다.

사용 예시:
    >>> pc_gens = PedersenGens()
    >>> bp_gens = BulletproofGens(64)
    >>> C = pc_gens.commit(FR(5), random_scalar())
"""

from zkp.bulletproofs.errors import InsufficientGeneratorsError
from zkp.bulletproofs.field import (
    G1, ec_add, ec_mul, ec_eq, hash_to_point, to_fr,
)


PEDERSEN_BLINDING_LABEL = b"PedersenGens.B_blinding"
G_VEC_LABEL = b"BulletproofGens.G"
H_VEC_LABEL = b"BulletproofGens.H"


class PedersenGens:
    """Pedersen 커밋먼트 생성자 쌍 (B, B_blinding).

    속성:
        B: 값 생성자
        B_blinding: 블라인딩 생성자
    """

    def __init__(self, B=None, B_blinding=None):
        self.B = G1 if B is None else B
        self.B_blinding = (
            hash_to_point(PEDERSEN_BLINDING_LABEL) if B_blinding is None else B_blinding
        )

    def commit(self, value, blinding):
        """C = value·B + blinding·B_blinding

        Args:
            value: 커밋할 값 (int 또는 FR)
            blinding: 블라인딩 인자 (int 또는 FR)

        Returns:
            G1 점
        """
        return ec_add(
            ec_mul(self.B, to_fr(value)),
            ec_mul(self.B_blinding, to_fr(blinding)),
        )

    def __eq__(self, other):
        if not isinstance(other, PedersenGens):
            return NotImplemented
        return ec_eq(self.B, other.B) and ec_eq(self.B_blinding, other.B_blinding)


class BulletproofGens:
    """벡터 커밋먼트용 생성자 G_vec, H_vec.

    속성:
        capacity: 생성자 벡터 길이 (증명할 수 있는 최대 패딩 곱셈 수)
        G_vec: [G₀, G₁, ..., G_{capacity-1}]
        H_vec: [H₀, H₁, ..., H_{capacity-1}]
    """

    def __init__(self, capacity, G_vec=None, H_vec=None):
        if capacity < 1:
            raise ValueError(f"capacity는 1 이상이어야 합니다: {capacity}")
        if G_vec is None:
            G_vec = [hash_to_point(G_VEC_LABEL + i.to_bytes(4, "big")) for i in range(capacity)]
        if H_vec is None:
            H_vec = [hash_to_point(H_VEC_LABEL + i.to_bytes(4, "big")) for i in range(capacity)]
        if len(G_vec) != capacity or len(H_vec) != capacity:
            raise ValueError("G_vec, H_vec 길이가 capacity와 다릅니다")

        self.capacity = capacity
        self.G_vec = list(G_vec)
        self.H_vec = list(H_vec)

    def G(self, n):
        """앞에서부터 n개의 G 생성자."""
        self._require(n)
        return self.G_vec[:n]

    def H(self, n):
        """앞에서부터 n개의 H 생성자."""
        self._require(n)
        return self.H_vec[:n]

    def _require(self, n):
        if n > self.capacity:
            raise InsufficientGeneratorsError(n, self.capacity)
