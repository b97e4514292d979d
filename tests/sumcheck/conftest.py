import sys
import os
import random
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from piop.sumcheck.field import FR
from piop.sumcheck.commitment import ScalarScheme, GroupScheme
from piop.sumcheck.multilinear import DenseMultilinearPolynomial
from piop.sumcheck.virtual_polynomial import VirtualPolynomial, random_mle_list


# ── 테스트 상수 ──
# 2변수 MLE, 하이퍼큐브 위의 합 = 1 + 1 + 1 + 2 = 5
SUM5_EVALS = [1, 1, 1, 2]
SUM5_TOTAL = 5


@pytest.fixture(scope="session")
def scalar_scheme():
    return ScalarScheme()


@pytest.fixture(scope="session")
def group_scheme():
    return GroupScheme()


@pytest.fixture
def sum5_poly():
    """합이 5인 2변수 다중선형 가상 다항식."""
    return VirtualPolynomial.from_mle(DenseMultilinearPolynomial(2, SUM5_EVALS))


@pytest.fixture
def cubic_poly():
    """3변수, max_degree = 3 인 가상 다항식.

    g = 3·f₀·f₁·f₂ + 2·f₀·f₃ + f₄
    (항의 차수가 서로 달라 외삽 경로를 모두 지난다)
    """
    rng = random.Random(2024)
    f = random_mle_list(3, 5, rng)
    vp = VirtualPolynomial(3)
    vp.add_mle_list([f[0], f[1], f[2]], FR(3))
    vp.add_mle_list([f[0], f[3]], FR(2))
    vp.add_mle_list([f[4]], FR(1))
    return vp
