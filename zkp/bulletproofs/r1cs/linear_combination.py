"""
R1CS 변수(Variable)와 선형결합(LinearCombination)
==================================================

제약 시스템이 다루는 모든 대수식은 변수들의 선형결합이다.

**변수 종류**:
  | 종류              | 의미                                   |
  |-------------------|----------------------------------------|
  | COMMITTED         | 커밋된 값 vⱼ (Pedersen 커밋먼트 Vⱼ)    |
  | MULTIPLIER_LEFT   | i번째 곱셈 게이트의 왼쪽 입력 a_L[i]   |
  | MULTIPLIER_RIGHT  | i번째 곱셈 게이트의 오른쪽 입력 a_R[i] |
  | MULTIPLIER_OUTPUT | i번째 곱셈 게이트의 출력 a_O[i]        |
  | ONE               | 상수 1                                 |

**연산자**:
  Variable, int, FR 을 +, -, 단항 -, 스칼라 * 로 조합하면
  LinearCombination이 된다.

    >>> x[0] - z             # x₀ - z·1
    >>> out - y[1] * FR(3)   # out - 3·y₁

  주의: FR이 왼쪽 피연산자인 식(z - x[0], FR(3) * y[1])은 py_ecc FR이
  NotImplemented 대신 TypeError를 내므로 쓸 수 없다. 항상 변수를 왼쪽에 둔다.
"""

from enum import Enum

from zkp.bulletproofs.field import FR, to_fr


class VariableKind(Enum):
    COMMITTED = "committed"
    MULTIPLIER_LEFT = "multiplier_left"
    MULTIPLIER_RIGHT = "multiplier_right"
    MULTIPLIER_OUTPUT = "multiplier_output"
    ONE = "one"


class Variable:
    """제약 시스템이 할당한 변수 핸들.

    값 자체는 담지 않는다. Prover는 할당값을 자기 쪽에 따로 보관하고,
    Verifier 쪽 변수에는 값이 없다.
    """

    __slots__ = ("kind", "index")

    def __init__(self, kind, index=0):
        self.kind = kind
        self.index = index

    @classmethod
    def one(cls):
        return cls(VariableKind.ONE, 0)

    def __eq__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return self.kind == other.kind and self.index == other.index

    def __hash__(self):
        return hash((self.kind, self.index))

    def __repr__(self):
        if self.kind is VariableKind.ONE:
            return "Variable(one)"
        return f"Variable({self.kind.value}, {self.index})"

    # 연산자는 모두 LinearCombination으로 위임한다

    def __add__(self, other):
        return LinearCombination.coerce(self) + other

    def __radd__(self, other):
        return LinearCombination.coerce(other) + self

    def __sub__(self, other):
        return LinearCombination.coerce(self) - other

    def __rsub__(self, other):
        return LinearCombination.coerce(other) - self

    def __neg__(self):
        return -LinearCombination.coerce(self)

    def __mul__(self, scalar):
        return LinearCombination.coerce(self) * scalar

    def __rmul__(self, scalar):
        return LinearCombination.coerce(self) * scalar


class LinearCombination:
    """Σ cᵢ·varᵢ 형태의 선형결합.

    속성:
        terms: (Variable, FR) 튜플 리스트. 같은 변수가 여러 번 나와도 된다.
    """

    __slots__ = ("terms",)

    def __init__(self, terms=None):
        self.terms = list(terms) if terms else []

    @classmethod
    def coerce(cls, value):
        """Variable, int, FR, LinearCombination → LinearCombination."""
        if isinstance(value, LinearCombination):
            return value
        if isinstance(value, Variable):
            return cls([(value, FR(1))])
        return cls([(Variable.one(), to_fr(value))])

    def __add__(self, other):
        other = LinearCombination.coerce(other)
        return LinearCombination(self.terms + other.terms)

    def __radd__(self, other):
        return LinearCombination.coerce(other) + self

    def __sub__(self, other):
        return self + (-LinearCombination.coerce(other))

    def __rsub__(self, other):
        return LinearCombination.coerce(other) - self

    def __neg__(self):
        return LinearCombination([(var, -coeff) for var, coeff in self.terms])

    def __mul__(self, scalar):
        scalar = to_fr(scalar)
        return LinearCombination([(var, coeff * scalar) for var, coeff in self.terms])

    def __rmul__(self, scalar):
        return self * scalar

    def __repr__(self):
        return f"LinearCombination({self.terms!r})"
