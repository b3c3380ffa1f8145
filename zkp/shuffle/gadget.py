"""
순열 검사 가젯 (Permutation Gadget)
====================================

두 변수 수열 x, y가 서로의 순열임을 제약한다.

**아이디어**:
  x가 y의 순열이면 두 다항식
    f(Z) = Π (xᵢ - Z),   g(Z) = Π (yᵢ - Z)
  는 같은 다항식이다. 근의 중복집합이 같기 때문이다.
  모든 커밋먼트가 트랜스크립트에 들어간 뒤에 뽑은 챌린지 z에서
  f(z) == g(z) 를 확인하면, Schwartz-Zippel 보조정리에 의해
  순열이 아닌데 통과할 확률은 (k-1)/|F| 이하이다.

**곱셈 체인** (k ≥ 2, 한쪽 당 k-1개 게이트):
  out = (x[k-1] - z)·(x[k-2] - z)
  out = out·(x[i] - z)    for i = k-3, ..., 0

  예시 (k = 3):
    gate 0: (x₂ - z)·(x₁ - z)
    gate 1: gate0_out·(x₀ - z)
    gate 2: (y₂ - z)·(y₁ - z)
    gate 3: gate2_out·(y₀ - z)
    constrain(gate1_out - gate3_out)

**k = 1**:
  곱셈 게이트 없이 y₀ - x₀ = 0 하나만 제약한다. 챌린지를 뽑지 않는다.
"""

from zkp.shuffle.errors import check_lengths


SHUFFLE_CHALLENGE_LABEL = b"shuffle challenge"


def _product_chain(cs, variables, z):
    k = len(variables)
    _, _, out = cs.multiply(variables[k - 1] - z, variables[k - 2] - z)
    for i in range(k - 3, -1, -1):
        _, _, out = cs.multiply(out, variables[i] - z)
    return out


def shuffle_gadget(cs, x, y):
    """x와 y가 서로의 순열이라는 제약을 cs에 추가한다.

    Prover와 Verifier에 완전히 같은 연산 순서를 적용한다.

    Args:
        cs: ConstraintSystem (Prover 또는 Verifier), COMMITTING 단계
        x: 입력 변수 리스트
        y: 출력 변수 리스트

    Raises:
        LengthMismatchError: 길이가 다르거나 비어 있을 때
        PhaseError: cs가 COMMITTING 단계가 아닐 때 (k ≥ 2)
    """
    k = check_lengths(len(x), len(y))

    if k == 1:
        cs.constrain(y[0] - x[0])
        return

    cs.randomize()
    z = cs.challenge_scalar(SHUFFLE_CHALLENGE_LABEL)

    x_product = _product_chain(cs, x, z)
    y_product = _product_chain(cs, y, z)
    cs.constrain(x_product - y_product)
