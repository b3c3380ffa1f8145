"""
Bulletproofs 기반 모듈: 스칼라 필드 및 G1 그룹 연산
=====================================================

이 모듈은 R1CS 증명 백엔드와 셔플 증명 전체에서 사용되는 기본 대수적
도구를 정의한다.

**스칼라 필드 FR**:
  bn128 타원곡선의 스칼라 필드 (위수 r ≈ 2^254, 소수체).
  비밀 값, 블라인딩 인자, 챌린지는 모두 FR 원소이다.

**G1 그룹 연산**:
  Pedersen 커밋먼트와 벡터 커밋먼트에 쓰이는 bn128 G1 점 연산.
  py_ecc의 optimized_bn128 (Jacobian 좌표)을 사용한다.
  항등원(무한원점)은 Z1 = (1, 1, 0)으로 표현된다.

**hash_to_point**:
  이산로그를 아무도 모르는 생성자(nothing-up-my-sleeve)를 만들기 위한
  try-and-increment 해시. bn128에서 p ≡ 3 (mod 4)이므로
  제곱근은 a^((p+1)/4) 한 번으로 구해지고, G1의 cofactor는 1이다.

**직렬화**:
  점: 64바이트 (x || y, 빅엔디안 아핀 좌표), 항등원은 64바이트의 0.
  스칼라: 32바이트 빅엔디안, r 이상의 값은 거부.

사용 예시:
    >>> from zkp.bulletproofs.field import FR, G1, ec_mul, ec_add
    >>> P = ec_mul(G1, FR(5))           # 5·G1
    >>> Q = ec_add(P, ec_mul(G1, 2))    # 7·G1
"""

import hashlib
import secrets

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import optimized_bn128 as bn128


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드 FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ를 상속하여 +, -, *, /, ** 연산을 제공한다.

    예시:
        >>> FR(3) * FR(7)   # FR(21)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 스칼라 필드 위수 r
CURVE_ORDER = bn128.curve_order

# 좌표 필드 위수 p
FIELD_MODULUS = bn128.field_modulus

SCALAR_BYTES = 32
POINT_BYTES = 64


def to_fr(value):
    """int 또는 FR을 FR로 변환한다."""
    if isinstance(value, FR):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return FR(value)
    raise TypeError(f"스칼라는 int 또는 FR이어야 합니다: {type(value).__name__}")


def random_scalar():
    """CSPRNG에서 균일한 FR 원소를 뽑는다 (블라인딩 인자용).

    secrets 모듈의 실패는 그대로 전파된다.
    """
    return FR(secrets.randbelow(CURVE_ORDER))


def scalar_to_bytes(scalar):
    """FR → 32바이트 빅엔디안."""
    return int(scalar).to_bytes(SCALAR_BYTES, "big")


def scalar_from_bytes(data):
    """32바이트 빅엔디안 → FR.

    Raises:
        ValueError: 길이가 틀리거나 값이 r 이상일 때 (비정규 인코딩)
    """
    if len(data) != SCALAR_BYTES:
        raise ValueError(f"스칼라는 {SCALAR_BYTES}바이트여야 합니다: {len(data)}")
    value = int.from_bytes(data, "big")
    if value >= CURVE_ORDER:
        raise ValueError("비정규 스칼라 인코딩입니다")
    return FR(value)


def inner_product(a_vec, b_vec):
    """<a, b> = Σ aᵢ·bᵢ"""
    if len(a_vec) != len(b_vec):
        raise ValueError(f"벡터 길이가 다릅니다: {len(a_vec)} != {len(b_vec)}")
    result = FR(0)
    for a, b in zip(a_vec, b_vec):
        result = result + a * b
    return result


def scalar_powers(base, n):
    """[1, base, base², ..., base^(n-1)]"""
    powers = []
    current = FR(1)
    for _ in range(n):
        powers.append(current)
        current = current * base
    return powers


def next_power_of_two(n):
    """n 이상의 가장 작은 2의 거듭제곱 (n ≤ 1이면 1)."""
    if n <= 1:
        return 1
    p = 1
    while p < n:
        p <<= 1
    return p


# ─────────────────────────────────────────────────────────────────────
# G1 그룹 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# G1 생성자
G1 = bn128.G1

# 항등원 (무한원점)
Z1 = bn128.Z1

# 곡선 방정식 y² = x³ + 3 의 상수항
CURVE_B = 3


def ec_mul(point, scalar):
    """스칼라 곱셈: scalar · point.

    Args:
        point: G1 점 (Jacobian)
        scalar: int 또는 FR
    """
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """점 덧셈: p1 + p2."""
    return bn128.add(p1, p2)


def ec_eq(p1, p2):
    """Jacobian 좌표의 두 점이 같은 점인지 비교한다."""
    return bn128.eq(p1, p2)


def is_identity(point):
    """항등원(무한원점) 여부."""
    return bn128.is_inf(point)


def multiscalar_mul(scalars, points):
    """Σ scalarsᵢ · pointsᵢ

    0 스칼라는 건너뛴다.

    Raises:
        ValueError: 두 리스트의 길이가 다를 때
    """
    if len(scalars) != len(points):
        raise ValueError(f"스칼라 {len(scalars)}개, 점 {len(points)}개: 길이가 다릅니다")
    result = Z1
    for scalar, point in zip(scalars, points):
        if int(scalar) % CURVE_ORDER == 0:
            continue
        result = ec_add(result, ec_mul(point, scalar))
    return result


def to_affine(point):
    """G1 점 → (x, y) 정수 쌍. 항등원은 None."""
    if is_identity(point):
        return None
    x, y = bn128.normalize(point)
    return int(x), int(y)


def point_to_bytes(point):
    """G1 점 → 64바이트 (x || y). 항등원은 64바이트의 0."""
    affine = to_affine(point)
    if affine is None:
        return b"\x00" * POINT_BYTES
    x, y = affine
    return x.to_bytes(32, "big") + y.to_bytes(32, "big")


def point_from_bytes(data):
    """64바이트 → G1 점.

    Raises:
        ValueError: 길이가 틀리거나, 좌표가 p 이상이거나, 곡선 위의 점이 아닐 때
    """
    if len(data) != POINT_BYTES:
        raise ValueError(f"점은 {POINT_BYTES}바이트여야 합니다: {len(data)}")
    if data == b"\x00" * POINT_BYTES:
        return Z1
    x = int.from_bytes(data[:32], "big")
    y = int.from_bytes(data[32:], "big")
    if x >= FIELD_MODULUS or y >= FIELD_MODULUS:
        raise ValueError("좌표가 필드 위수를 넘습니다")
    if (y * y - x * x * x - CURVE_B) % FIELD_MODULUS != 0:
        raise ValueError("곡선 위의 점이 아닙니다")
    return (bn128.FQ(x), bn128.FQ(y), bn128.FQ(1))


def hash_to_point(label):
    """바이트열 레이블에서 G1 점을 결정론적으로 유도한다.

    x = SHA-256(label || counter) mod p 를 늘려가며
    x³ + 3 이 제곱잉여가 되는 첫 x를 택한다.
    y는 두 근 중 정수값이 작은 쪽으로 고정한다.

    Args:
        label: bytes

    Returns:
        G1 점 (Jacobian)
    """
    counter = 0
    while True:
        digest = hashlib.sha256(label + counter.to_bytes(4, "big")).digest()
        x = int.from_bytes(digest, "big") % FIELD_MODULUS
        rhs = (pow(x, 3, FIELD_MODULUS) + CURVE_B) % FIELD_MODULUS
        y = pow(rhs, (FIELD_MODULUS + 1) // 4, FIELD_MODULUS)
        if y * y % FIELD_MODULUS == rhs:
            y = min(y, FIELD_MODULUS - y)
            return (bn128.FQ(x), bn128.FQ(y), bn128.FQ(1))
        counter += 1
