"""
Sum-check Verifier
===================

라운드 메시지를 흡수하며 챌린지를 생성하고, 라운드 간 연결 불변식을 검사한다.

**검증 과정 (라운드 i)**:
  1. 메시지 길이 확인: len(g_i) == max_degree + 1      (아니면 DegreeBoundExceeded)
  2. 연결 불변식:      g_i(0) + g_i(1) == 주장값 C_i      (아니면 ConsistencyCheckFailed)
       C_0     = commit(S)                (외부에서 주어진 합)
       C_{i+1} = g_i(r_i) = Σ_j L_j(r_i)·g_i(j)
  3. 메시지 흡수 → 챌린지 r_i 생성
  4. round += 1, round == num_vars 이면 finished

  평가값이 커밋된 값(G1 점)이어도 덧셈과 스칼라 배만 사용하므로
  Verifier는 평가값을 모른 채로 검사를 수행한다.

**최종 단계**:
  sum-check는 S에 대한 주장을 "g(r₀, ..., r_{n-1}) = C_n" 하나로 축약한다.
  이 SubClaim의 확인(오라클 열기)은 외부 증명 시스템의 몫이다.

사용 예시:
    >>> from piop.sumcheck.verifier import verify
    >>> subclaim = verify(claimed_sum, proof, num_vars, max_degree, Transcript())
    >>> subclaim.check_evaluation(virtual_poly.evaluate(subclaim.point), ScalarScheme())
"""

import logging

from piop.sumcheck.field import to_fr
from piop.sumcheck.commitment import default_scheme
from piop.sumcheck.errors import (
    ProtocolViolation, DegreeBoundExceeded, ConsistencyCheckFailed, SerializationError,
)
from piop.sumcheck.extrapolation import ExtrapolationTable
from piop.sumcheck.structs import (
    Proof, SubClaim, Verdict, VerificationResult, append_aux_info, LABEL_CHALLENGE,
)
from piop.sumcheck.serializers import deserialize_proof


logger = logging.getLogger(__name__)


class VerifierState:
    """Verifier 측 작업 상태.

    Finished 이후에도 외부 최종 검사를 위해 유지된다.

    속성:
        round: 현재 라운드 번호
        num_vars, max_degree: 세션 파라미터 (고정)
        finished: round == num_vars
        polynomials_received: 받은 라운드 메시지의 평가값 로그
        challenges: 생성한 챌린지 로그
        expected: 다음 메시지가 g(0) + g(1)로 맞춰야 하는 커밋된 주장값
        transcript: 이 세션이 소유하는 트랜스크립트
    """

    def __init__(self, num_vars, max_degree, claimed_sum, transcript, scheme=None):
        if num_vars < 1:
            raise ValueError(f"num_vars는 1 이상이어야 합니다: {num_vars}")
        if max_degree < 1:
            raise ValueError(f"max_degree는 1 이상이어야 합니다: {max_degree}")

        self.round = 0
        self.num_vars = num_vars
        self.max_degree = max_degree
        self.finished = False
        self.polynomials_received = []
        self.challenges = []

        self.transcript = transcript
        self.scheme = default_scheme(scheme)
        self.extrapolation = ExtrapolationTable(max_degree)
        self.expected = self.scheme.commit(to_fr(claimed_sum))

    @classmethod
    def initialize(cls, num_vars, max_degree, claimed_sum, transcript, scheme=None):
        """round = 0, finished = False, 빈 로그로 세션을 시작한다.

        대화식 세션은 트랜스크립트에 num_vars와 max_degree를 흡수하지 않는다.
        이렇게 얻은 Proof를 verify()로 다시 검사하려면 세션을 시작하기 전에
        append_aux_info(transcript, num_vars, max_degree)를 먼저 호출해야 한다.
        """
        return cls(num_vars, max_degree, claimed_sum, transcript, scheme=scheme)

    def verify_round(self, message):
        """라운드 메시지를 검사하고 챌린지를 반환한다.

        Args:
            message: ProverMessage

        Returns:
            FR: 이 라운드의 챌린지 r_i

        Raises:
            ProtocolViolation: 이미 finished일 때
            DegreeBoundExceeded: 메시지 길이가 max_degree + 1이 아닐 때
            ConsistencyCheckFailed: g_i(0) + g_i(1) != 주장값일 때
        """
        if self.finished:
            raise ProtocolViolation(
                f"모든 {self.num_vars} 라운드가 끝난 뒤 verify_round가 호출되었습니다"
            )

        evaluations = list(message.evaluations)
        if len(evaluations) != self.max_degree + 1:
            logger.warning(
                "round %d rejected: %d evaluations, expected %d",
                self.round, len(evaluations), self.max_degree + 1,
            )
            raise DegreeBoundExceeded(
                f"라운드 {self.round} 메시지의 평가값은 {self.max_degree + 1}개여야 합니다: "
                f"{len(evaluations)}"
            )

        # ── 연결 불변식: g_i(0) + g_i(1) == C_i ──
        boundary = self.scheme.add(evaluations[0], evaluations[1])
        if not self.scheme.equal(boundary, self.expected):
            logger.warning("round %d rejected: linking check failed", self.round)
            raise ConsistencyCheckFailed(
                f"라운드 {self.round}: g(0) + g(1)이 이전 라운드의 주장값과 다릅니다",
                round=self.round,
            )

        # ── 메시지 흡수 → 챌린지 ──
        message.append_to_transcript(self.transcript, self.scheme)
        challenge = self.transcript.challenge_scalar(LABEL_CHALLENGE)

        self.polynomials_received.append(evaluations)
        self.challenges.append(challenge)

        # ── 다음 주장값: C_{i+1} = g_i(r_i) ──
        coefficients = self.extrapolation.lagrange_coefficients(self.max_degree, challenge)
        self.expected = self.scheme.combine(coefficients, evaluations)

        self.round += 1
        self.finished = self.round == self.num_vars
        logger.debug("verifier round %d/%d accepted", self.round, self.num_vars)
        return challenge

    def check_and_generate_subclaim(self):
        """모든 라운드가 끝난 뒤 SubClaim(point, expected_evaluation)을 만든다.

        Raises:
            ProtocolViolation: 라운드가 남아 있을 때
        """
        if not self.finished:
            raise ProtocolViolation(
                f"라운드 {self.round}/{self.num_vars}에서 서브클레임을 요청했습니다"
            )
        return SubClaim(self.challenges, self.expected)


def verify(claimed_sum, proof, num_vars, max_degree, transcript, scheme=None):
    """비대화식 sum-check 증명을 검증하고 SubClaim을 반환한다.

    Prover의 prove()와 같은 순서로 트랜스크립트를 재생한다.

    Args:
        claimed_sum: 주장하는 합 S (스칼라)
        proof: Proof
        num_vars: 변수 개수
        max_degree: 변수당 최대 차수
        transcript: 이 세션이 소유하는 Transcript (Prover와 같은 레이블)
        scheme: 커밋 스킴 (기본값: ScalarScheme)

    Returns:
        SubClaim: 외부 오라클 열기 검사에 넘길 평가 주장

    Raises:
        DegreeBoundExceeded, ConsistencyCheckFailed
    """
    state = VerifierState.initialize(num_vars, max_degree, claimed_sum, transcript, scheme)
    append_aux_info(transcript, num_vars, max_degree)

    if len(proof.proofs) != num_vars:
        raise ConsistencyCheckFailed(
            f"증명의 라운드 메시지는 {num_vars}개여야 합니다: {len(proof.proofs)}"
        )

    for message in proof.proofs:
        state.verify_round(message)

    subclaim = state.check_and_generate_subclaim()
    if list(proof.point) != subclaim.point:
        raise ConsistencyCheckFailed("증명의 평가 점이 트랜스크립트 챌린지와 다릅니다")

    logger.info("sum-check proof accepted: num_vars=%d, max_degree=%d", num_vars, max_degree)
    return subclaim


def check(claimed_sum, proof, num_vars, max_degree, transcript, scheme=None):
    """verify()와 같지만 입력에 의한 실패를 결과 값으로 돌려준다.

    proof는 Proof 객체 외에 와이어 포맷 바이트(Proof.to_bytes)나
    JSON dict(serializers.serialize_proof)여도 되며, 디코딩도 여기서 한다.

    Returns:
        VerificationResult:
            ACCEPTED  — subclaim 포함
            REJECTED  — ConsistencyCheckFailed (정상 실행, 증명 거부)
            MALFORMED — DegreeBoundExceeded / SerializationError (입력 형식 오류)
    """
    scheme = default_scheme(scheme)
    try:
        if isinstance(proof, (bytes, bytearray)):
            proof = Proof.from_bytes(proof, num_vars, max_degree, scheme)
        elif isinstance(proof, dict):
            proof = deserialize_proof(proof, num_vars, max_degree, scheme)
        subclaim = verify(claimed_sum, proof, num_vars, max_degree, transcript, scheme)
    except ConsistencyCheckFailed as e:
        return VerificationResult(Verdict.REJECTED, error=e)
    except (DegreeBoundExceeded, SerializationError) as e:
        logger.warning("malformed sum-check proof: %s", e)
        return VerificationResult(Verdict.MALFORMED, error=e)
    return VerificationResult(Verdict.ACCEPTED, subclaim=subclaim)
