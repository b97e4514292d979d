"""
다중선형 확장 / 가상 다항식 오라클 테스트
"""

import random
import pytest

from piop.sumcheck.field import FR
from piop.sumcheck.multilinear import DenseMultilinearPolynomial
from piop.sumcheck.virtual_polynomial import (
    SumcheckOracle, VirtualPolynomial, random_mle_list,
)


def _bits(i, n):
    return [FR((i >> k) & 1) for k in range(n)]


class TestDenseMultilinearPolynomial:
    def test_wrong_length(self):
        with pytest.raises(ValueError):
            DenseMultilinearPolynomial(2, [1, 2, 3])

    def test_sum_over_hypercube(self):
        f = DenseMultilinearPolynomial(2, [1, 2, 3, 4])
        assert f.sum_over_hypercube() == FR(10)

    def test_fix_first_variable_boolean(self):
        f = DenseMultilinearPolynomial(2, [1, 2, 3, 4])
        assert f.fix_first_variable(FR(0)).evaluations == [1, 3]
        assert f.fix_first_variable(FR(1)).evaluations == [2, 4]

    def test_fix_first_variable_does_not_mutate(self):
        f = DenseMultilinearPolynomial(2, [1, 2, 3, 4])
        g = f.fix_first_variable(FR(7))
        assert g is not f
        assert f.num_vars == 2
        assert f.evaluations == [1, 2, 3, 4]
        assert g.num_vars == 1

    def test_fix_constant_raises(self):
        with pytest.raises(ValueError):
            DenseMultilinearPolynomial(0, [5]).fix_first_variable(FR(1))

    def test_evaluate_on_hypercube(self):
        f = DenseMultilinearPolynomial(2, [1, 2, 3, 4])
        for i in range(4):
            assert f.evaluate(_bits(i, 2)) == f.evaluations[i]

    def test_evaluate_first(self):
        f = DenseMultilinearPolynomial(2, [1, 2, 3, 4])
        # 나머지 변수 = 1 → (3, 4) 구간, x = 5 → 3 + 5·(4 − 3)
        assert f.evaluate_first(FR(5), 1) == FR(8)

    def test_evaluate_is_multilinear(self):
        f = DenseMultilinearPolynomial(1, [3, 10])
        assert f.evaluate([FR(2)]) == FR(17)

    def test_evaluate_wrong_point_length(self):
        f = DenseMultilinearPolynomial(2, [1, 2, 3, 4])
        with pytest.raises(ValueError):
            f.evaluate([FR(1)])

    def test_from_function(self):
        f = DenseMultilinearPolynomial.from_function(2, lambda b: b[0] + 2 * b[1])
        assert f.evaluations == [0, 1, 2, 3]


class TestVirtualPolynomial:
    @pytest.fixture
    def parts(self):
        rng = random.Random(7)
        return random_mle_list(3, 3, rng)

    def test_structure(self, parts):
        vp = VirtualPolynomial(3)
        vp.add_mle_list([parts[0], parts[1]], FR(2))
        vp.add_mle_list([parts[2]], 5)
        assert vp.num_vars == 3
        assert vp.max_degree == 2
        assert vp.num_terms() == 2
        assert vp.term_degree(0) == 2
        assert vp.term_degree(1) == 1

    def test_is_oracle(self, parts):
        assert isinstance(VirtualPolynomial.from_mle(parts[0]), SumcheckOracle)

    def test_reuses_same_mle(self, parts):
        vp = VirtualPolynomial(3)
        vp.add_mle_list([parts[0], parts[0]], 1)
        vp.add_mle_list([parts[0], parts[1]], 1)
        assert len(vp.flattened_ml_extensions) == 2

    def test_rejects_empty_product(self):
        with pytest.raises(ValueError):
            VirtualPolynomial(2).add_mle_list([], 1)

    def test_rejects_mismatched_vars(self, parts):
        vp = VirtualPolynomial(2)
        with pytest.raises(ValueError):
            vp.add_mle_list([parts[0]], 1)

    def test_sum_over_hypercube(self, parts):
        vp = VirtualPolynomial(3)
        vp.add_mle_list([parts[0], parts[1]], FR(2))
        vp.add_mle_list([parts[2]], FR(5))
        expected = FR(0)
        for i in range(8):
            a = parts[0].evaluations[i]
            b = parts[1].evaluations[i]
            c = parts[2].evaluations[i]
            expected = expected + FR(2) * a * b + FR(5) * c
        assert vp.sum_over_hypercube() == expected

    def test_evaluate_term(self, parts):
        vp = VirtualPolynomial(3)
        vp.add_mle_list([parts[0], parts[1]], FR(3))
        x = FR(11)
        expected = FR(3) * parts[0].evaluate_first(x, 2) * parts[1].evaluate_first(x, 2)
        assert vp.evaluate_term(0, x, 2) == expected

    def test_fix_first_variable(self, parts):
        vp = VirtualPolynomial(3)
        vp.add_mle_list([parts[0], parts[1]], FR(2))
        vp.add_mle_list([parts[2]], FR(1))
        r = FR(99)
        reduced = vp.fix_first_variable(r)
        assert reduced is not vp
        assert reduced.num_vars == 2
        assert vp.num_vars == 3
        assert reduced.max_degree == vp.max_degree
        rest = [FR(4), FR(8)]
        assert reduced.evaluate(rest) == vp.evaluate([r] + rest)

    def test_fix_constant_raises(self):
        vp = VirtualPolynomial.from_mle(DenseMultilinearPolynomial(0, [1]))
        with pytest.raises(ValueError):
            vp.fix_first_variable(FR(1))

    def test_base_oracle_is_abstract(self):
        oracle = SumcheckOracle()
        with pytest.raises(NotImplementedError):
            oracle.num_terms()
        with pytest.raises(NotImplementedError):
            oracle.fix_first_variable(FR(1))
