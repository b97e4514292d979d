"""
커밋된 값(Committed Value) 스킴
================================

라운드 메시지의 각 평가값은 "커밋된 값"으로 전달된다.
엔진은 아래 연산만 사용하므로, 스칼라를 그대로 보내는 고전적인 sum-check와
커밋먼트를 실어 보내는 변형이 하나의 Prover/Verifier 구현을 공유한다.

  ┌──────────────────────┬─────────────────────────────────────────┐
  │  commit(v)           │  스칼라 v를 커밋된 값으로 변환              │
  │  add(a, b)           │  커밋된 값의 덧셈 (동형)                   │
  │  scale(a, s)         │  스칼라 배 (동형)                         │
  │  combine(cs, vs)     │  Σ cᵢ·vᵢ  (Verifier의 보간 평가에 사용)     │
  │  encode / decode     │  정규 바이트 인코딩                        │
  └──────────────────────┴─────────────────────────────────────────┘

**ScalarScheme**:
  커밋하지 않는 스킴. commit(v) = v. 교과서적인 sum-check 프로토콜과 같다.

**GroupScheme**:
  commit(v) = v·G (bn128 G1). 덧셈 동형이므로
    commit(a) + commit(b) = commit(a + b)
    s·commit(a)           = commit(s·a)
  가 성립하고, Verifier는 평가값을 모른 채로
    m(0) + m(1) == 이전 라운드의 주장값
  을 그룹 위에서 확인할 수 있다. 블라인딩이 없으므로 영지식(hiding)은 아니다.

사용 예시:
    >>> scheme = GroupScheme()
    >>> c = scheme.add(scheme.commit(FR(2)), scheme.commit(FR(3)))
    >>> c == scheme.commit(FR(5))  # True
"""

from piop.sumcheck.field import (
    FR, G1, SCALAR_SIZE,
    ec_mul, ec_add,
    to_fr, scalar_to_bytes, scalar_from_bytes, g1_to_bytes, g1_from_bytes,
)


class ScalarScheme:
    """평가값을 FR 스칼라 그대로 싣는 스킴 (고전적 sum-check)."""

    name = "scalar"
    encoded_size = SCALAR_SIZE

    def commit(self, value):
        return to_fr(value)

    def zero(self):
        return FR(0)

    def add(self, a, b):
        return a + b

    def scale(self, a, scalar):
        return a * to_fr(scalar)

    def combine(self, coefficients, values):
        """Σ cᵢ·vᵢ 를 계산한다."""
        result = self.zero()
        for c, v in zip(coefficients, values):
            result = self.add(result, self.scale(v, c))
        return result

    def equal(self, a, b):
        return a == b

    def encode(self, value):
        return scalar_to_bytes(value)

    def decode(self, data):
        return scalar_from_bytes(data)

    def __repr__(self):
        return "ScalarScheme()"


class GroupScheme(ScalarScheme):
    """평가값 v를 v·G (bn128 G1 점)로 싣는 덧셈 동형 스킴.

    속성:
        generator: 커밋에 사용하는 G1 생성자 (기본값: bn128.G1)
    """

    name = "bn128-g1"
    encoded_size = 2 * SCALAR_SIZE

    def __init__(self, generator=G1):
        self.generator = generator

    def commit(self, value):
        """v·G 를 계산한다.

        예시:
            >>> GroupScheme().commit(FR(1)) == G1  # True
        """
        return ec_mul(self.generator, to_fr(value))

    def zero(self):
        return None  # 무한원점

    def add(self, a, b):
        return ec_add(a, b)

    def scale(self, a, scalar):
        return ec_mul(a, scalar)

    def combine(self, coefficients, values):
        # 계수가 0인 항은 건너뛴다 (스칼라 곱이 가장 비싼 연산)
        result = self.zero()
        for c, v in zip(coefficients, values):
            if to_fr(c) == FR(0):
                continue
            result = self.add(result, self.scale(v, c))
        return result

    def encode(self, value):
        return g1_to_bytes(value)

    def decode(self, data):
        return g1_from_bytes(data)

    def __repr__(self):
        return f"GroupScheme(generator={self.generator!r})"


def default_scheme(scheme=None):
    """scheme이 None이면 ScalarScheme을 반환한다."""
    return ScalarScheme() if scheme is None else scheme
