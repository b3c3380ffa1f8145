"""
Bulletproofs 기반 모듈 테스트.

테스트 대상:
  - field: FR 변환, 스칼라/점 직렬화, multiscalar_mul, hash_to_point
  - Transcript: 결정론성, 레이블 민감도, 체이닝
  - PedersenGens / BulletproofGens: 커밋먼트 성질, 결정론적 유도, 용량
"""

import pytest

from zkp.bulletproofs.errors import InsufficientGeneratorsError
from zkp.bulletproofs.field import (
    FR, CURVE_ORDER, FIELD_MODULUS, G1, Z1, POINT_BYTES, CURVE_B,
    ec_add, ec_eq, ec_mul, hash_to_point, inner_product,
    is_identity, multiscalar_mul, next_power_of_two, point_from_bytes,
    point_to_bytes, random_scalar, scalar_from_bytes, scalar_powers,
    scalar_to_bytes, to_affine, to_fr,
)
from zkp.bulletproofs.generators import BulletproofGens, PedersenGens
from zkp.bulletproofs.transcript import Transcript


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드
# ─────────────────────────────────────────────────────────────────────

class TestScalars:

    def test_to_fr_int_and_fr(self):
        assert to_fr(5) == FR(5)
        assert to_fr(FR(7)) == FR(7)

    def test_to_fr_reduces_negative(self):
        assert to_fr(-1) == FR(CURVE_ORDER - 1)

    def test_to_fr_rejects_bool_and_str(self):
        with pytest.raises(TypeError):
            to_fr(True)
        with pytest.raises(TypeError):
            to_fr("3")

    def test_random_scalar_in_range(self):
        s = random_scalar()
        assert isinstance(s, FR)
        assert 0 <= int(s) < CURVE_ORDER

    def test_random_scalars_differ(self):
        assert random_scalar() != random_scalar()

    def test_scalar_bytes_roundtrip(self):
        s = FR(123456789)
        data = scalar_to_bytes(s)
        assert len(data) == 32
        assert scalar_from_bytes(data) == s

    def test_scalar_from_bytes_rejects_non_canonical(self):
        with pytest.raises(ValueError):
            scalar_from_bytes(CURVE_ORDER.to_bytes(32, "big"))

    def test_scalar_from_bytes_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            scalar_from_bytes(b"\x01" * 31)

    def test_inner_product(self):
        assert inner_product([FR(1), FR(2), FR(3)], [FR(4), FR(5), FR(6)]) == FR(32)

    def test_inner_product_length_mismatch(self):
        with pytest.raises(ValueError):
            inner_product([FR(1)], [FR(1), FR(2)])

    def test_scalar_powers(self):
        assert scalar_powers(FR(3), 4) == [FR(1), FR(3), FR(9), FR(27)]
        assert scalar_powers(FR(3), 0) == []

    @pytest.mark.parametrize("n,expected", [(0, 1), (1, 1), (2, 2), (3, 4), (5, 8), (8, 8), (14, 16)])
    def test_next_power_of_two(self, n, expected):
        assert next_power_of_two(n) == expected


# ─────────────────────────────────────────────────────────────────────
# G1 점
# ─────────────────────────────────────────────────────────────────────

class TestPoints:

    def test_ec_mul_add(self):
        assert ec_eq(ec_add(ec_mul(G1, 5), ec_mul(G1, FR(2))), ec_mul(G1, 7))

    def test_ec_mul_reduces_scalar(self):
        assert ec_eq(ec_mul(G1, CURVE_ORDER + 3), ec_mul(G1, 3))
        assert is_identity(ec_mul(G1, CURVE_ORDER))

    def test_multiscalar_mul(self):
        P, Q = ec_mul(G1, 2), ec_mul(G1, 3)
        assert ec_eq(multiscalar_mul([FR(4), FR(5)], [P, Q]), ec_mul(G1, 23))

    def test_multiscalar_mul_zero_scalars(self):
        assert is_identity(multiscalar_mul([FR(0), FR(0)], [G1, G1]))
        assert is_identity(multiscalar_mul([], []))

    def test_multiscalar_mul_length_mismatch(self):
        with pytest.raises(ValueError):
            multiscalar_mul([FR(1)], [G1, G1])

    def test_point_bytes_roundtrip(self):
        P = ec_mul(G1, 987654321)
        data = point_to_bytes(P)
        assert len(data) == POINT_BYTES
        assert ec_eq(point_from_bytes(data), P)

    def test_identity_encoding(self):
        assert point_to_bytes(Z1) == b"\x00" * POINT_BYTES
        assert is_identity(point_from_bytes(b"\x00" * POINT_BYTES))
        assert to_affine(Z1) is None

    def test_point_from_bytes_rejects_off_curve(self):
        x, y = to_affine(G1)
        bad = x.to_bytes(32, "big") + (y + 1).to_bytes(32, "big")
        with pytest.raises(ValueError):
            point_from_bytes(bad)

    def test_point_from_bytes_rejects_large_coordinate(self):
        bad = FIELD_MODULUS.to_bytes(32, "big") + (2).to_bytes(32, "big")
        with pytest.raises(ValueError):
            point_from_bytes(bad)

    def test_hash_to_point_on_curve(self):
        x, y = to_affine(hash_to_point(b"label"))
        assert (y * y - x ** 3 - CURVE_B) % FIELD_MODULUS == 0

    def test_hash_to_point_deterministic_and_distinct(self):
        assert ec_eq(hash_to_point(b"a"), hash_to_point(b"a"))
        assert not ec_eq(hash_to_point(b"a"), hash_to_point(b"b"))

    def test_hash_to_point_not_generator(self):
        assert not ec_eq(hash_to_point(b"PedersenGens.B_blinding"), G1)


# ─────────────────────────────────────────────────────────────────────
# Transcript
# ─────────────────────────────────────────────────────────────────────

class TestTranscript:

    def _transcript(self, label=b"test"):
        t = Transcript(label)
        t.append_message(b"dom-sep", b"ShuffleProof")
        t.append_scalar(b"k", FR(3))
        t.append_point(b"V", ec_mul(G1, 5))
        t.append_u64(b"m", 6)
        return t

    def test_deterministic(self):
        c1 = self._transcript().challenge_scalar(b"z")
        c2 = self._transcript().challenge_scalar(b"z")
        assert c1 == c2
        assert isinstance(c1, FR)

    def test_label_sensitive(self):
        c1 = self._transcript(b"test").challenge_scalar(b"z")
        c2 = self._transcript(b"other").challenge_scalar(b"z")
        assert c1 != c2

    def test_challenge_label_sensitive(self):
        assert self._transcript().challenge_scalar(b"y") != self._transcript().challenge_scalar(b"z")

    def test_data_sensitive(self):
        t1, t2 = Transcript(b"test"), Transcript(b"test")
        t1.append_scalar(b"k", FR(3))
        t2.append_scalar(b"k", FR(4))
        assert t1.challenge_scalar(b"z") != t2.challenge_scalar(b"z")

    def test_length_prefix_prevents_concatenation_collision(self):
        t1, t2 = Transcript(b"test"), Transcript(b"test")
        t1.append_message(b"a", b"bc")
        t2.append_message(b"ab", b"c")
        assert t1.challenge_scalar(b"x") != t2.challenge_scalar(b"x")

    def test_consecutive_challenges_differ(self):
        t = self._transcript()
        assert t.challenge_scalar(b"u") != t.challenge_scalar(b"u")


# ─────────────────────────────────────────────────────────────────────
# 생성자
# ─────────────────────────────────────────────────────────────────────

class TestPedersenGens:

    def test_commit_definition(self, pc_gens):
        C = pc_gens.commit(5, 7)
        expected = ec_add(ec_mul(pc_gens.B, 5), ec_mul(pc_gens.B_blinding, 7))
        assert ec_eq(C, expected)

    def test_commit_homomorphic(self, pc_gens):
        C = ec_add(pc_gens.commit(2, 10), pc_gens.commit(3, 20))
        assert ec_eq(C, pc_gens.commit(5, 30))

    def test_commit_hiding(self, pc_gens):
        assert not ec_eq(pc_gens.commit(5, random_scalar()), pc_gens.commit(5, random_scalar()))

    def test_default_generators_deterministic(self, pc_gens):
        assert PedersenGens() == pc_gens
        assert ec_eq(pc_gens.B, G1)


class TestBulletproofGens:

    def test_slices(self, bp_gens):
        assert len(bp_gens.G(4)) == 4
        assert len(bp_gens.H(bp_gens.capacity)) == bp_gens.capacity
        assert ec_eq(bp_gens.G(2)[1], bp_gens.G_vec[1])

    def test_deterministic_and_distinct(self, bp_gens):
        other = BulletproofGens(4)
        assert all(ec_eq(a, b) for a, b in zip(other.G_vec, bp_gens.G_vec))
        assert not ec_eq(bp_gens.G_vec[0], bp_gens.H_vec[0])
        assert not ec_eq(bp_gens.G_vec[0], bp_gens.G_vec[1])

    def test_insufficient_capacity(self, bp_gens):
        with pytest.raises(InsufficientGeneratorsError) as exc_info:
            bp_gens.G(bp_gens.capacity + 1)
        assert exc_info.value.required == bp_gens.capacity + 1
        assert exc_info.value.capacity == bp_gens.capacity

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            BulletproofGens(0)
