import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.bulletproofs.generators import BulletproofGens, PedersenGens


# 셔플 k ≤ 8 → 곱셈 게이트 2(k-1) = 14개 → 패딩 16
TEST_GENS_CAPACITY = 16


@pytest.fixture(scope="session")
def pc_gens():
    return PedersenGens()


@pytest.fixture(scope="session")
def bp_gens():
    return BulletproofGens(TEST_GENS_CAPACITY)
