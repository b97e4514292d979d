"""
조밀한 다중선형 확장 (Dense Multilinear Extension)
===================================================

n변수 다중선형 다항식 f(x₀, ..., x_{n-1})를 불리언 하이퍼큐브 {0,1}^n 위의
평가값 2^n개로 표현한다.

**인덱스 규약**:
  evaluations[i] = f(b₀, b₁, ..., b_{n-1}),  i = Σ bₖ·2^k
  즉 변수 0이 인덱스의 최하위 비트이다.
  sum-check의 "첫 번째 자유 변수"는 항상 변수 0이다.

**첫 변수 고정 (fix_first_variable)**:
  f(r, x₁, ..., x_{n-1}) = (1 − r)·f(0, x₁, ...) + r·f(1, x₁, ...)

  evaluations'[j] = E[2j] + r·(E[2j+1] − E[2j])     (길이 2^(n-1))

  결과는 새 객체이며 원래 다항식은 변하지 않는다.

사용 예시:
    >>> f = DenseMultilinearPolynomial(2, [1, 2, 3, 4])
    >>> f.sum_over_hypercube()           # FR(10)
    >>> f.fix_first_variable(FR(0)).evaluations  # [1, 3]
"""

from piop.sumcheck.field import FR, to_fr


class DenseMultilinearPolynomial:
    """평가값 테이블로 표현된 다중선형 다항식.

    속성:
        num_vars: 변수 개수 n
        evaluations: 길이 2^n 의 FR 리스트
    """

    def __init__(self, num_vars, evaluations):
        if num_vars < 0:
            raise ValueError(f"num_vars는 0 이상이어야 합니다: {num_vars}")
        if len(evaluations) != 1 << num_vars:
            raise ValueError(
                f"평가값 개수는 2^{num_vars} = {1 << num_vars}이어야 합니다: {len(evaluations)}"
            )
        self.num_vars = num_vars
        self.evaluations = [to_fr(e) for e in evaluations]

    @classmethod
    def from_function(cls, num_vars, fn):
        """각 불리언 점 b에서 fn(bits)로 평가값을 채운다.

        예시:
            >>> DenseMultilinearPolynomial.from_function(2, lambda b: b[0] + 2 * b[1])
        """
        evals = []
        for i in range(1 << num_vars):
            bits = [(i >> k) & 1 for k in range(num_vars)]
            evals.append(fn(bits))
        return cls(num_vars, evals)

    def evaluate_first(self, x, index):
        """첫 변수를 x로, 나머지 변수를 index의 비트로 둔 값.

        Args:
            x: 첫 변수의 값 (FR)
            index: 나머지 n−1개 변수의 불리언 할당 (0 ≤ index < 2^(n-1))

        Returns:
            FR: f(x, bits(index))
        """
        lo = self.evaluations[2 * index]
        hi = self.evaluations[2 * index + 1]
        return lo + x * (hi - lo)

    def fix_first_variable(self, value):
        """첫 변수를 value로 고정한 (n−1)변수 다항식을 새로 만든다."""
        if self.num_vars == 0:
            raise ValueError("고정할 변수가 없습니다 (상수 다항식)")
        r = to_fr(value)
        evals = self.evaluations
        folded = [
            evals[2 * j] + r * (evals[2 * j + 1] - evals[2 * j])
            for j in range(len(evals) // 2)
        ]
        return DenseMultilinearPolynomial(self.num_vars - 1, folded)

    def evaluate(self, point):
        """점 (r₀, ..., r_{n-1})에서 다중선형 확장을 평가한다."""
        if len(point) != self.num_vars:
            raise ValueError(
                f"평가 점의 길이는 {self.num_vars}이어야 합니다: {len(point)}"
            )
        poly = self
        for r in point:
            poly = poly.fix_first_variable(r)
        return poly.evaluations[0]

    def sum_over_hypercube(self):
        """Σ_{b ∈ {0,1}^n} f(b)."""
        total = FR(0)
        for e in self.evaluations:
            total = total + e
        return total

    def __eq__(self, other):
        if not isinstance(other, DenseMultilinearPolynomial):
            return NotImplemented
        return self.num_vars == other.num_vars and self.evaluations == other.evaluations

    def __repr__(self):
        return f"DenseMultilinearPolynomial({self.num_vars}, {[int(e) for e in self.evaluations]})"
