"""
Sum-check Verifier 테스트
==========================

VerifierState 상태 기계, 연결 불변식, 건전성(soundness)을 테스트한다.

테스트 다항식: f = [1, 1, 1, 2] (2변수), 하이퍼큐브 위의 합 = 5
"""

import pytest

from piop.sumcheck.field import FR, G1, ec_add
from piop.sumcheck.commitment import ScalarScheme, GroupScheme
from piop.sumcheck.errors import (
    ProtocolViolation, DegreeBoundExceeded, ConsistencyCheckFailed, SerializationError,
)
from piop.sumcheck.transcript import Transcript
from piop.sumcheck.structs import Proof, ProverMessage, Verdict, append_aux_info
from piop.sumcheck.prover import ProverState, prove
from piop.sumcheck.verifier import VerifierState, verify, check
from piop.sumcheck.serializers import serialize_proof


def _tamper(proof, round_index, position, scheme):
    """라운드 round_index 메시지의 position번째 평가값을 틀린 값으로 바꾼다."""
    proofs = [list(m.evaluations) for m in proof.proofs]
    value = proofs[round_index][position]
    if isinstance(scheme, GroupScheme):
        proofs[round_index][position] = ec_add(value, G1)
    else:
        proofs[round_index][position] = value + FR(1)
    return Proof(proof.point, [ProverMessage(m) for m in proofs])


# ===========================================================================
# 초기화
# ===========================================================================

class TestInitialize:
    def test_initial_state(self):
        v = VerifierState.initialize(3, 2, FR(10), Transcript())
        assert v.round == 0
        assert v.num_vars == 3
        assert v.max_degree == 2
        assert v.finished is False
        assert v.polynomials_received == []
        assert v.challenges == []
        assert v.expected == FR(10)

    def test_group_claim_is_committed(self):
        scheme = GroupScheme()
        v = VerifierState.initialize(2, 1, FR(5), Transcript(), scheme)
        assert v.expected == scheme.commit(FR(5))

    def test_rejects_zero_vars(self):
        with pytest.raises(ValueError):
            VerifierState.initialize(0, 2, FR(0), Transcript())

    def test_rejects_zero_degree(self):
        with pytest.raises(ValueError):
            VerifierState.initialize(2, 0, FR(0), Transcript())


# ===========================================================================
# 대화식 세션
# ===========================================================================

class TestInteractiveSession:
    def test_honest_session_finishes(self, cubic_poly):
        prover = ProverState.initialize(cubic_poly)
        verifier = VerifierState.initialize(
            3, 3, cubic_poly.sum_over_hypercube(), Transcript()
        )
        for _ in range(3):
            assert not verifier.finished
            prover.receive_challenge(verifier.verify_round(prover.run_round()))
        assert verifier.finished
        assert verifier.round == 3
        assert len(verifier.polynomials_received) == 3

        proof = prover.finalize()
        subclaim = verifier.check_and_generate_subclaim()
        assert list(proof.point) == verifier.challenges
        assert subclaim.point == verifier.challenges
        assert subclaim.expected_evaluation == cubic_poly.evaluate(subclaim.point)

    def test_round_count_bound(self, sum5_poly):
        prover = ProverState.initialize(sum5_poly)
        verifier = VerifierState.initialize(2, 1, FR(5), Transcript())
        messages = []
        for _ in range(2):
            messages.append(prover.run_round())
            prover.receive_challenge(verifier.verify_round(messages[-1]))
        with pytest.raises(ProtocolViolation):
            verifier.verify_round(messages[-1])

    def test_subclaim_before_finished(self, sum5_poly):
        prover = ProverState.initialize(sum5_poly)
        verifier = VerifierState.initialize(2, 1, FR(5), Transcript())
        verifier.verify_round(prover.run_round())
        with pytest.raises(ProtocolViolation):
            verifier.check_and_generate_subclaim()

    def test_wrong_length_is_recoverable(self, sum5_poly):
        prover = ProverState.initialize(sum5_poly)
        verifier = VerifierState.initialize(2, 1, FR(5), Transcript())
        message = prover.run_round()
        bad = ProverMessage(list(message.evaluations) + [FR(0)])
        with pytest.raises(DegreeBoundExceeded):
            verifier.verify_round(bad)
        assert verifier.round == 0
        assert verifier.polynomials_received == []
        assert verifier.challenges == []
        # 올바른 메시지로 계속 진행할 수 있다
        verifier.verify_round(message)
        assert verifier.round == 1

    def test_short_message(self):
        verifier = VerifierState.initialize(2, 2, FR(5), Transcript())
        with pytest.raises(DegreeBoundExceeded):
            verifier.verify_round(ProverMessage([FR(2), FR(3)]))

    def test_wrong_claim_rejected_at_round_zero(self, sum5_poly):
        prover = ProverState.initialize(sum5_poly)
        verifier = VerifierState.initialize(2, 1, FR(6), Transcript())
        with pytest.raises(ConsistencyCheckFailed) as excinfo:
            verifier.verify_round(prover.run_round())
        assert excinfo.value.round == 0
        assert verifier.round == 0
        assert verifier.challenges == []

    def test_determinism(self, cubic_poly):
        proof = prove(cubic_poly, Transcript())
        claim = cubic_poly.sum_over_hypercube()
        runs = []
        for _ in range(2):
            v = VerifierState.initialize(3, 3, claim, Transcript())
            append_aux_info(v.transcript, 3, 3)
            for m in proof.proofs:
                v.verify_round(m)
            assert v.finished
            runs.append(list(v.challenges))
        assert len(runs[0]) == 3
        assert runs[0] == runs[1]
        assert runs[0] == list(proof.point)

    def test_interactive_proof_rechecked_with_verify(self, cubic_poly):
        claim = cubic_poly.sum_over_hypercube()
        prover = ProverState.initialize(cubic_poly)
        verifier = VerifierState.initialize(3, 3, claim, Transcript())
        append_aux_info(verifier.transcript, 3, 3)
        for _ in range(3):
            prover.receive_challenge(verifier.verify_round(prover.run_round()))
        proof = prover.finalize()
        subclaim = verify(claim, proof, 3, 3, Transcript())
        assert subclaim.point == verifier.challenges


# ===========================================================================
# 건전성 (Soundness)
# ===========================================================================

class TestSoundness:
    @pytest.mark.parametrize("scheme", [ScalarScheme(), GroupScheme()], ids=["scalar", "group"])
    def test_any_single_tamper_rejected(self, sum5_poly, scheme):
        proof = prove(sum5_poly, Transcript(), scheme=scheme)
        # 정직한 증명은 통과
        verify(FR(5), proof, 2, 1, Transcript(), scheme)
        for r in range(2):
            for pos in range(2):
                tampered = _tamper(proof, r, pos, scheme)
                with pytest.raises(ConsistencyCheckFailed) as excinfo:
                    verify(FR(5), tampered, 2, 1, Transcript(), scheme)
                assert excinfo.value.round is not None
                assert excinfo.value.round <= r

    def test_interior_tamper_caught_next_round(self, cubic_poly, scalar_scheme):
        claim = cubic_poly.sum_over_hypercube()
        proof = prove(cubic_poly, Transcript())
        tampered = _tamper(proof, 0, 2, scalar_scheme)
        with pytest.raises(ConsistencyCheckFailed) as excinfo:
            verify(claim, tampered, 3, 3, Transcript())
        assert excinfo.value.round == 1

    def test_last_round_interior_tamper_caught_by_final_check(self, cubic_poly, scalar_scheme):
        claim = cubic_poly.sum_over_hypercube()
        proof = prove(cubic_poly, Transcript())
        tampered = _tamper(proof, 2, 3, scalar_scheme)
        verifier = VerifierState.initialize(3, 3, claim, Transcript())
        append_aux_info(verifier.transcript, 3, 3)
        for m in tampered.proofs:
            verifier.verify_round(m)
        subclaim = verifier.check_and_generate_subclaim()
        with pytest.raises(ConsistencyCheckFailed):
            subclaim.check_evaluation(cubic_poly.evaluate(subclaim.point), scalar_scheme)

    def test_wrong_message_count(self, sum5_poly):
        proof = prove(sum5_poly, Transcript())
        short = Proof(proof.point[:1], proof.proofs[:1])
        with pytest.raises(ConsistencyCheckFailed):
            verify(FR(5), short, 2, 1, Transcript())

    def test_point_mismatch(self, sum5_poly):
        proof = prove(sum5_poly, Transcript())
        forged = Proof([proof.point[0] + FR(1), proof.point[1]], proof.proofs)
        with pytest.raises(ConsistencyCheckFailed):
            verify(FR(5), forged, 2, 1, Transcript())

    def test_transcript_mismatch_rejected(self, cubic_poly):
        claim = cubic_poly.sum_over_hypercube()
        proof = prove(cubic_poly, Transcript(b"prover"))
        with pytest.raises(ConsistencyCheckFailed):
            verify(claim, proof, 3, 3, Transcript(b"verifier"))


# ===========================================================================
# check(): 결과 값
# ===========================================================================

class TestCheck:
    def test_accepted(self, sum5_poly):
        proof = prove(sum5_poly, Transcript())
        result = check(FR(5), proof, 2, 1, Transcript())
        assert result.verdict is Verdict.ACCEPTED
        assert result.accepted
        assert bool(result)
        assert result.error is None
        assert result.subclaim.point == list(proof.point)

    def test_rejected(self, sum5_poly):
        proof = prove(sum5_poly, Transcript())
        result = check(FR(4), proof, 2, 1, Transcript())
        assert result.verdict is Verdict.REJECTED
        assert not result
        assert result.subclaim is None
        assert isinstance(result.error, ConsistencyCheckFailed)

    def test_malformed(self, sum5_poly):
        proof = prove(sum5_poly, Transcript())
        bad = Proof(
            proof.point,
            [ProverMessage(list(m.evaluations) + [FR(0)]) for m in proof.proofs],
        )
        result = check(FR(5), bad, 2, 1, Transcript())
        assert result.verdict is Verdict.MALFORMED
        assert not result.accepted
        assert isinstance(result.error, DegreeBoundExceeded)

    def test_encoded_proof_accepted(self, sum5_poly, group_scheme):
        proof = prove(sum5_poly, Transcript(), scheme=group_scheme)
        data = proof.to_bytes(group_scheme)
        result = check(FR(5), data, 2, 1, Transcript(), group_scheme)
        assert result.verdict is Verdict.ACCEPTED

    def test_truncated_bytes_malformed(self, sum5_poly, scalar_scheme):
        data = prove(sum5_poly, Transcript()).to_bytes(scalar_scheme)
        result = check(FR(5), data[:-1], 2, 1, Transcript())
        assert result.verdict is Verdict.MALFORMED
        assert isinstance(result.error, SerializationError)

    def test_json_with_wrong_scheme_malformed(self, sum5_poly, scalar_scheme, group_scheme):
        data = serialize_proof(prove(sum5_poly, Transcript()), scalar_scheme)
        result = check(FR(5), data, 2, 1, Transcript(), group_scheme)
        assert result.verdict is Verdict.MALFORMED
        assert isinstance(result.error, SerializationError)

    def test_json_proof_accepted(self, sum5_poly, scalar_scheme):
        data = serialize_proof(prove(sum5_poly, Transcript()), scalar_scheme)
        assert check(FR(5), data, 2, 1, Transcript()).accepted
