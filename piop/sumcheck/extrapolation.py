"""
무게중심(Barycentric) 외삽 테이블
==================================

라운드 다항식 g(X)를 평가 표현 [g(0), g(1), ..., g(max_degree)]로 보내려면
차수가 낮은 항의 적은 평가값을 max_degree + 1개로 늘려야 한다.
계수를 복원하지 않고 미리 계산한 무게중심 가중치만으로 외삽한다.

**무게중심 가중치**:
  노드 x₀, ..., x_d에 대해

      w_j = 1 / Π_{k≠j} (x_j − x_k)

**제2형 무게중심 공식** (x가 노드가 아닐 때):

              Σ_j  w_j / (x − x_j) · p(x_j)
      p(x) = ───────────────────────────────
              Σ_j  w_j / (x − x_j)

  분모로 나누는 덕분에 Lagrange 계수
      L_j(x) = (w_j / (x − x_j)) / Σ_k (w_k / (x − x_k))
  는 합이 1이 되고, p(x) = Σ L_j(x)·p(x_j) 이다.

**sum-check에서의 역할**:
  - Prover: 차수 d인 항을 d + 1개의 탐침점(0..d)에서만 합산하고,
    나머지 d+1..max_degree는 이 테이블로 외삽한다.
  - Verifier: 커밋된 메시지를 챌린지 r에서 평가할 때
    L_j(r) 스칼라로 선형결합한다 (커밋먼트의 덧셈 동형 성질 이용).

사용 예시 (p(x) = x² + 1):
    >>> table = ExtrapolationTable(3)
    >>> table.extend(2, [FR(1), FR(2), FR(5)])  # [1, 2, 5, 10]
"""

from piop.sumcheck.field import FR, to_fr
from piop.sumcheck.errors import DegreeBoundExceeded


def barycentric_weights(points):
    """노드 집합의 무게중심 가중치를 계산한다.

    Args:
        points: 서로 다른 FR 원소의 리스트 [x₀, ..., x_d]

    Returns:
        list[FR]: w_j = 1 / Π_{k≠j}(x_j − x_k)

    예시:
        >>> barycentric_weights([FR(0), FR(1), FR(2)])  # [1/2, -1, 1/2]
    """
    points = [to_fr(p) for p in points]
    weights = []
    for j, xj in enumerate(points):
        denom = FR(1)
        for k, xk in enumerate(points):
            if k == j:
                continue
            diff = xj - xk
            if diff == FR(0):
                raise ValueError("무게중심 노드가 중복되었습니다")
            denom = denom * diff
        weights.append(FR(1) / denom)
    return weights


class ExtrapolationTable:
    """차수 0..max_degree 각각에 대한 노드와 가중치를 미리 계산해 둔 테이블.

    차수 d의 노드는 정규 탐침점 0, 1, ..., d 이다.
    생성 후에는 읽기 전용이므로 여러 스레드에서 공유해도 안전하다.

    속성:
        max_degree: 지원하는 최대 차수
        points: points[d] = [FR(0), ..., FR(d)]
        weights: weights[d] = barycentric_weights(points[d])
    """

    def __init__(self, max_degree):
        if max_degree < 0:
            raise ValueError(f"max_degree는 0 이상이어야 합니다: {max_degree}")
        self.max_degree = max_degree
        self.points = []
        self.weights = []
        for d in range(max_degree + 1):
            nodes = [FR(i) for i in range(d + 1)]
            self.points.append(nodes)
            self.weights.append(barycentric_weights(nodes))

    def _check(self, degree, evals=None):
        if degree < 0 or degree > self.max_degree:
            raise DegreeBoundExceeded(
                f"차수 {degree}가 최대 차수 {self.max_degree}를 초과합니다"
            )
        if evals is not None and len(evals) != degree + 1:
            raise ValueError(
                f"차수 {degree} 다항식에는 평가값 {degree + 1}개가 필요합니다: {len(evals)}"
            )

    def lagrange_coefficients(self, degree, at):
        """노드 0..degree에 대한 Lagrange 계수 [L_0(at), ..., L_d(at)].

        at이 노드와 같으면 해당 위치만 1인 단위 벡터를 반환한다.

        Args:
            degree: 다항식 차수 d
            at: 평가 점 (FR 또는 정수)

        Returns:
            list[FR]: p(at) = Σ L_j(at)·p(j) 를 만족하는 계수
        """
        self._check(degree)
        at = to_fr(at)
        points = self.points[degree]
        for j, xj in enumerate(points):
            if at == xj:
                unit = [FR(0)] * (degree + 1)
                unit[j] = FR(1)
                return unit

        terms = [w / (at - xj) for w, xj in zip(self.weights[degree], points)]
        total = FR(0)
        for t in terms:
            total = total + t
        total_inv = FR(1) / total
        return [t * total_inv for t in terms]

    def extrapolate(self, degree, evals, at):
        """차수 d 다항식의 d + 1개 평가값으로부터 at에서의 값을 구한다.

        Args:
            degree: 다항식 차수 d
            evals: [p(0), ..., p(d)]
            at: 평가 점

        Returns:
            FR: p(at)

        예시:
            >>> table.extrapolate(2, [FR(1), FR(2), FR(5)], 3)  # FR(10)
        """
        self._check(degree, evals)
        result = FR(0)
        for c, e in zip(self.lagrange_coefficients(degree, at), evals):
            result = result + c * to_fr(e)
        return result

    def extend(self, degree, evals):
        """평가값을 0..max_degree의 max_degree + 1개로 늘린다.

        Args:
            degree: 다항식 차수 d (≤ max_degree)
            evals: [p(0), ..., p(d)]

        Returns:
            list[FR]: [p(0), ..., p(d), p(d+1), ..., p(max_degree)]
        """
        self._check(degree, evals)
        extended = [to_fr(e) for e in evals]
        for x in range(degree + 1, self.max_degree + 1):
            extended.append(self.extrapolate(degree, evals, x))
        return extended
