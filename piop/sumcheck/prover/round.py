"""
Sum-check Prover 라운드: 라운드 다항식 계산
============================================

  ┌──────────────────────────────────────────────────────────┐
  │  입력:  현재 오라클 g(X, x₁, ..., x_{k-1})  (k = 남은 변수)  │
  │  출력:  [g_i(0), g_i(1), ..., g_i(max_degree)]  (커밋됨)   │
  └──────────────────────────────────────────────────────────┘

**라운드 다항식**:
      g_i(X) = Σ_{b ∈ {0,1}^{k-1}}  g(X, b)

  g는 항(term)의 합이므로 항별로 나누어 계산한다.

**최소 탐침점 + 외삽**:
  차수 d인 항 c·f₁·…·f_d 는 X에 대해 차수 d이므로
  d + 1개의 점 0, 1, ..., d 에서의 합만 있으면 충분하다.
  나머지 d+1..max_degree 는 ExtrapolationTable로 외삽한다.

      항 t:  [s_t(0), ..., s_t(d)]  ──extend──▶  [s_t(0), ..., s_t(max_degree)]
      g_i(j) = Σ_t s_t(j)

**병렬화**:
  탐침점별 하이퍼큐브 합산과 값별 커밋은 서로 독립이다.
  state.max_workers > 1 이면 ThreadPoolExecutor로 나누어 계산하고,
  모든 작업이 끝난 뒤(배리어) 메시지를 조립한다.
  작업자는 현재 오라클 스냅샷을 읽기만 한다.

사용:
    이 모듈은 직접 호출하지 않고, ProverState.run_round()를 통해 실행된다.
"""

from concurrent.futures import ThreadPoolExecutor

from piop.sumcheck.field import FR
from piop.sumcheck.structs import ProverMessage


def _map(pool, fn, items):
    """items에 fn을 적용한다. pool이 있으면 스레드 풀에 나누어 맡긴다."""
    items = list(items)
    if pool is not None and len(items) > 1:
        return list(pool.map(fn, items))
    return [fn(item) for item in items]


def sum_term_at(oracle, term, x):
    """항 term을 첫 변수 = x 로 두고 나머지 불리언 변수 전체에 대해 합산한다."""
    x = FR(x)
    total = FR(0)
    for index in range(1 << (oracle.num_vars - 1)):
        total = total + oracle.evaluate_term(term, x, index)
    return total


def compute_round_evaluations(state, pool=None):
    """현재 라운드 다항식의 스칼라 평가값 [g_i(0), ..., g_i(max_degree)]."""
    oracle = state.oracle
    table = state.extrapolation
    max_degree = state.max_degree

    totals = [FR(0)] * (max_degree + 1)
    for term in range(oracle.num_terms()):
        degree = oracle.term_degree(term)

        # ── 1. 탐침점 0..d 에서 하이퍼큐브 합산 ──
        probes = _map(pool, lambda x: sum_term_at(oracle, term, x), range(degree + 1))

        # ── 2. max_degree + 1개로 외삽 ──
        extended = table.extend(degree, probes)

        for j in range(max_degree + 1):
            totals[j] = totals[j] + extended[j]
    return totals


def _build_message(state, pool):
    evaluations = compute_round_evaluations(state, pool)

    # ── 3. 각 평가값 커밋 ──
    return ProverMessage(_map(pool, state.scheme.commit, evaluations))


def execute(state):
    """현재 라운드 메시지를 계산한다.

    state.max_workers > 1 이면 라운드 전체에서 스레드 풀 하나를 공유한다.

    Args:
        state: ProverState — 현재 오라클과 외삽 테이블을 읽는다.

    Returns:
        ProverMessage: 커밋된 평가값 max_degree + 1개
    """
    if state.max_workers and state.max_workers > 1:
        with ThreadPoolExecutor(max_workers=state.max_workers) as pool:
            return _build_message(state, pool)
    return _build_message(state, None)
