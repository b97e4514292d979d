"""
가상 다항식 오라클 (Virtual Polynomial Oracle)
===============================================

sum-check Prover는 다항식의 계수를 만들지 않는다. 대신 다항식을
여러 다중선형 확장(MLE)의 곱의 합으로 "가상으로" 표현하고,
필요한 점에서만 평가한다.

      g(x) = Σ_t  c_t · Π_{f ∈ product_t} f(x)

**오라클 능력 (SumcheckOracle)**:
  ┌────────────────────────────┬───────────────────────────────────────────┐
  │  num_vars                  │  남은 자유 변수 개수                         │
  │  max_degree                │  변수 하나에 대한 최대 차수 (가장 긴 곱의 길이)    │
  │  num_terms() / term_degree │  항(term)의 개수와 항별 차수                   │
  │  evaluate_term(t, x, idx)  │  첫 변수 = x, 나머지 = idx의 비트일 때 항 t의 값  │
  │  fix_first_variable(r)     │  첫 변수를 r로 고정한 새 (더 작은) 오라클           │
  └────────────────────────────┴───────────────────────────────────────────┘

  Prover는 이 능력만 사용하므로 다른 표현의 오라클로 교체할 수 있다.

**소유권**:
  fix_first_variable은 기존 오라클을 변경하지 않고 새 오라클을 만든다.
  라운드마다 현재 오라클을 소비하고 더 작은 스냅샷을 얻는 구조이므로,
  라운드 간 별칭(aliasing)이 생기지 않는다.

사용 예시 (g = 3·f₁·f₂ + f₃):
    >>> vp = VirtualPolynomial(2)
    >>> vp.add_mle_list([f1, f2], FR(3))
    >>> vp.add_mle_list([f3], FR(1))
    >>> vp.max_degree          # 2
    >>> vp.sum_over_hypercube()  # sum-check로 증명할 주장값 S
"""

from piop.sumcheck.field import FR, to_fr
from piop.sumcheck.multilinear import DenseMultilinearPolynomial


class SumcheckOracle:
    """sum-check Prover가 소비하는 오라클 능력.

    서브클래스는 아래 메서드를 모두 구현해야 한다.
    """

    num_vars = 0
    max_degree = 0

    def num_terms(self):
        raise NotImplementedError("서브클래스에서 구현해야 합니다")

    def term_degree(self, term):
        raise NotImplementedError("서브클래스에서 구현해야 합니다")

    def evaluate_term(self, term, x, index):
        raise NotImplementedError("서브클래스에서 구현해야 합니다")

    def fix_first_variable(self, value):
        raise NotImplementedError("서브클래스에서 구현해야 합니다")


class VirtualPolynomial(SumcheckOracle):
    """MLE 곱의 선형결합으로 표현된 가상 다항식.

    속성:
        num_vars: 변수 개수
        max_degree: 가장 긴 곱의 길이
        products: [(계수, [MLE 인덱스, ...]), ...]
        flattened_ml_extensions: 중복 없는 MLE 리스트
    """

    def __init__(self, num_vars):
        if num_vars < 0:
            raise ValueError(f"num_vars는 0 이상이어야 합니다: {num_vars}")
        self.num_vars = num_vars
        self.max_degree = 0
        self.products = []
        self.flattened_ml_extensions = []

    @classmethod
    def from_mle(cls, mle, coefficient=1):
        """단일 MLE c·f 로 가상 다항식을 만든다."""
        vp = cls(mle.num_vars)
        vp.add_mle_list([mle], coefficient)
        return vp

    def _index_of(self, mle):
        # 같은 객체는 한 번만 저장한다
        for i, existing in enumerate(self.flattened_ml_extensions):
            if existing is mle:
                return i
        self.flattened_ml_extensions.append(mle)
        return len(self.flattened_ml_extensions) - 1

    def add_mle_list(self, mles, coefficient=1):
        """c · Π mles 항을 추가한다.

        Args:
            mles: DenseMultilinearPolynomial의 비어 있지 않은 리스트
            coefficient: 항의 계수 (FR 또는 정수)

        Raises:
            ValueError: 리스트가 비었거나 변수 개수가 다를 때
        """
        mles = list(mles)
        if not mles:
            raise ValueError("곱에는 MLE가 하나 이상 있어야 합니다")
        for mle in mles:
            if mle.num_vars != self.num_vars:
                raise ValueError(
                    f"MLE 변수 개수 {mle.num_vars}가 가상 다항식의 {self.num_vars}와 다릅니다"
                )
        indices = [self._index_of(mle) for mle in mles]
        self.products.append((to_fr(coefficient), indices))
        self.max_degree = max(self.max_degree, len(indices))
        return self

    # ── 오라클 능력 ──

    def num_terms(self):
        return len(self.products)

    def term_degree(self, term):
        return len(self.products[term][1])

    def evaluate_term(self, term, x, index):
        coefficient, indices = self.products[term]
        value = coefficient
        for i in indices:
            value = value * self.flattened_ml_extensions[i].evaluate_first(x, index)
        return value

    def fix_first_variable(self, value):
        """첫 변수를 value로 고정한 새 가상 다항식을 반환한다.

        곱 구조(계수와 인덱스)는 그대로 두고, 각 MLE만 접는다.
        """
        if self.num_vars == 0:
            raise ValueError("고정할 변수가 없습니다 (상수 다항식)")
        r = to_fr(value)
        reduced = VirtualPolynomial(self.num_vars - 1)
        reduced.max_degree = self.max_degree
        reduced.products = [(c, list(indices)) for c, indices in self.products]
        reduced.flattened_ml_extensions = [
            mle.fix_first_variable(r) for mle in self.flattened_ml_extensions
        ]
        return reduced

    # ── 평가 ──

    def evaluate(self, point):
        """점에서 가상 다항식을 평가한다 (최종 오라클 열기 검사용)."""
        values = [mle.evaluate(point) for mle in self.flattened_ml_extensions]
        total = FR(0)
        for coefficient, indices in self.products:
            term = coefficient
            for i in indices:
                term = term * values[i]
            total = total + term
        return total

    def sum_over_hypercube(self):
        """Σ_{b ∈ {0,1}^n} g(b): 정직한 Prover의 주장값 S."""
        total = FR(0)
        for i in range(1 << self.num_vars):
            for coefficient, indices in self.products:
                term = coefficient
                for j in indices:
                    term = term * self.flattened_ml_extensions[j].evaluations[i]
                total = total + term
        return total


def random_mle_list(num_vars, count, rng):
    """테스트와 예제용 무작위 MLE 리스트를 만든다.

    Args:
        num_vars: 변수 개수
        count: MLE 개수
        rng: random.Random 인스턴스 (결정론적 재현용)
    """
    return [
        DenseMultilinearPolynomial(
            num_vars, [FR(rng.randrange(1 << 32)) for _ in range(1 << num_vars)]
        )
        for _ in range(count)
    ]
