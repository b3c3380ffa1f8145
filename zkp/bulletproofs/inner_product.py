"""
내적 논증 (Inner Product Argument)
===================================

P = <a, G> + <b, H> + <a, b>·Q 를 만족하는 벡터 a, b를 안다는 것을
log₂(n)개 라운드로 증명한다.

**한 라운드 (n → n/2)**:
  a = (a_lo, a_hi), b = (b_lo, b_hi), G = (G_lo, G_hi), H = (H_lo, H_hi)

  c_L = <a_lo, b_hi>                c_R = <a_hi, b_lo>
  L = <a_lo, G_hi> + <b_hi, H_lo> + c_L·Q
  R = <a_hi, G_lo> + <b_lo, H_hi> + c_R·Q

  챌린지 u (트랜스크립트에서 L, R 추가 후)

  a' = u·a_lo + u⁻¹·a_hi            b' = u⁻¹·b_lo + u·b_hi
  G' = u⁻¹·G_lo + u·G_hi            H' = u·H_lo + u⁻¹·H_hi
  P' = u²·L + P + u⁻²·R

  전개하면 P' = <a', G'> + <b', H'> + <a', b'>·Q 가 성립한다.

**마지막 (n = 1)**:
  Verifier는 P == a·G + b·H + a·b·Q 를 확인한다.

n은 2의 거듭제곱이어야 한다. Verifier는 생성자를 라운드마다 직접 접는다.
"""

from zkp.bulletproofs.errors import MalformedProofError
from zkp.bulletproofs.field import (
    FR, POINT_BYTES, SCALAR_BYTES,
    ec_add, ec_mul, ec_eq, inner_product, multiscalar_mul,
    point_from_bytes, point_to_bytes, scalar_from_bytes, scalar_to_bytes,
)


def _fold_points(lo, hi, lo_factor, hi_factor):
    return [
        ec_add(ec_mul(p_lo, lo_factor), ec_mul(p_hi, hi_factor))
        for p_lo, p_hi in zip(lo, hi)
    ]


def _fold_scalars(lo, hi, lo_factor, hi_factor):
    return [s_lo * lo_factor + s_hi * hi_factor for s_lo, s_hi in zip(lo, hi)]


class InnerProductProof:
    """내적 논증 증명.

    속성:
        L_vec: 라운드별 L 점 리스트
        R_vec: 라운드별 R 점 리스트
        a: 최종 스칼라 a
        b: 최종 스칼라 b
    """

    def __init__(self, L_vec, R_vec, a, b):
        if len(L_vec) != len(R_vec):
            raise MalformedProofError("L, R 개수가 다릅니다")
        self.L_vec = list(L_vec)
        self.R_vec = list(R_vec)
        self.a = a
        self.b = b

    @classmethod
    def create(cls, transcript, Q, G_vec, H_vec, a_vec, b_vec):
        """내적 논증을 생성한다.

        Args:
            transcript: Fiat-Shamir 트랜스크립트 (상태가 진행됨)
            Q: <a, b>에 곱해지는 점
            G_vec, H_vec: 생성자 벡터 (길이 n)
            a_vec, b_vec: 비밀 벡터 (길이 n)

        Returns:
            InnerProductProof
        """
        n = len(a_vec)
        if not (len(b_vec) == len(G_vec) == len(H_vec) == n):
            raise ValueError("내적 논증 입력 벡터의 길이가 다릅니다")
        if n < 1 or n & (n - 1):
            raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")

        transcript.append_u64(b"ipp.n", n)

        a, b = list(a_vec), list(b_vec)
        G, H = list(G_vec), list(H_vec)
        L_vec, R_vec = [], []

        while n > 1:
            n //= 2
            a_lo, a_hi = a[:n], a[n:]
            b_lo, b_hi = b[:n], b[n:]
            G_lo, G_hi = G[:n], G[n:]
            H_lo, H_hi = H[:n], H[n:]

            c_L = inner_product(a_lo, b_hi)
            c_R = inner_product(a_hi, b_lo)

            L = multiscalar_mul(a_lo + b_hi + [c_L], G_hi + H_lo + [Q])
            R = multiscalar_mul(a_hi + b_lo + [c_R], G_lo + H_hi + [Q])
            L_vec.append(L)
            R_vec.append(R)

            transcript.append_point(b"L", L)
            transcript.append_point(b"R", R)
            u = transcript.challenge_scalar(b"u")
            u_inv = FR(1) / u

            a = _fold_scalars(a_lo, a_hi, u, u_inv)
            b = _fold_scalars(b_lo, b_hi, u_inv, u)
            G = _fold_points(G_lo, G_hi, u_inv, u)
            H = _fold_points(H_lo, H_hi, u, u_inv)

        return cls(L_vec, R_vec, a[0], b[0])

    def verify(self, transcript, Q, G_vec, H_vec, P):
        """내적 논증을 검증한다.

        Args:
            transcript: Prover와 같은 상태의 트랜스크립트
            Q: <a, b>에 곱해지는 점
            G_vec, H_vec: 생성자 벡터 (길이 n)
            P: 주장된 커밋먼트

        Returns:
            bool: 검증 성공 여부
        """
        n = len(G_vec)
        if len(H_vec) != n or n < 1 or n & (n - 1):
            return False
        if 1 << len(self.L_vec) != n:
            return False

        transcript.append_u64(b"ipp.n", n)

        G, H = list(G_vec), list(H_vec)
        for L, R in zip(self.L_vec, self.R_vec):
            transcript.append_point(b"L", L)
            transcript.append_point(b"R", R)
            u = transcript.challenge_scalar(b"u")
            u_inv = FR(1) / u
            u_sq = u * u
            u_inv_sq = u_inv * u_inv

            half = len(G) // 2
            G = _fold_points(G[:half], G[half:], u_inv, u)
            H = _fold_points(H[:half], H[half:], u, u_inv)
            P = ec_add(P, ec_add(ec_mul(L, u_sq), ec_mul(R, u_inv_sq)))

        expected = multiscalar_mul(
            [self.a, self.b, self.a * self.b],
            [G[0], H[0], Q],
        )
        return ec_eq(P, expected)

    def serialized_size(self):
        return 2 * POINT_BYTES * len(self.L_vec) + 2 * SCALAR_BYTES

    def to_bytes(self):
        """L₀ R₀ L₁ R₁ ... a b"""
        out = bytearray()
        for L, R in zip(self.L_vec, self.R_vec):
            out.extend(point_to_bytes(L))
            out.extend(point_to_bytes(R))
        out.extend(scalar_to_bytes(self.a))
        out.extend(scalar_to_bytes(self.b))
        return bytes(out)

    @classmethod
    def from_bytes(cls, data):
        """to_bytes()의 역변환.

        Raises:
            MalformedProofError: 길이나 인코딩이 올바르지 않을 때
        """
        body = len(data) - 2 * SCALAR_BYTES
        if body < 0 or body % (2 * POINT_BYTES) != 0:
            raise MalformedProofError(f"내적 증명 길이가 올바르지 않습니다: {len(data)}")
        rounds = body // (2 * POINT_BYTES)
        if rounds > 32:
            raise MalformedProofError(f"라운드 수가 너무 많습니다: {rounds}")

        try:
            L_vec, R_vec = [], []
            pos = 0
            for _ in range(rounds):
                L_vec.append(point_from_bytes(data[pos:pos + POINT_BYTES]))
                pos += POINT_BYTES
                R_vec.append(point_from_bytes(data[pos:pos + POINT_BYTES]))
                pos += POINT_BYTES
            a = scalar_from_bytes(data[pos:pos + SCALAR_BYTES])
            b = scalar_from_bytes(data[pos + SCALAR_BYTES:pos + 2 * SCALAR_BYTES])
        except ValueError as exc:
            raise MalformedProofError(str(exc)) from exc
        return cls(L_vec, R_vec, a, b)

