"""
Sum-check Prover — 라운드 상태 기계
=====================================

"g가 불리언 하이퍼큐브 위에서 S로 합산된다"는 주장을
변수 하나씩 num_vars 라운드에 걸쳐 단일 평가 주장으로 축약한다.

**상태 기계**:

  Initialized ─▶ Round(0) ─▶ Round(1) ─▶ … ─▶ Round(n-1) ─▶ Finished

  ┌─────────────────────────────────────────────────────┐
  │  run_round()          Prover → Verifier: g_i(0..d)  │
  │  receive_challenge(r) Verifier → Prover: r_i        │
  │                       g ← g(r_i, X₁, ...)  (새 오라클) │
  └─────────────────────────────────────────────────────┘

  한 라운드는 run_round() 한 번과 receive_challenge() 한 번으로 이루어진다.
  순서를 어기거나, Finished 이후에 라운드를 호출하거나,
  모든 라운드 전에 finalize()를 호출하면 ProtocolViolation이 발생한다.

사용 예시 (비대화식):
    >>> from piop.sumcheck.prover import prove
    >>> proof = prove(virtual_poly, Transcript())

사용 예시 (대화식, Verifier가 챌린지를 생성):
    >>> prover = ProverState.initialize(virtual_poly)
    >>> verifier = VerifierState.initialize(n, d, claimed_sum, Transcript())
    >>> for _ in range(n):
    ...     prover.receive_challenge(verifier.verify_round(prover.run_round()))
    >>> proof = prover.finalize()
"""

import logging

from piop.sumcheck.field import to_fr
from piop.sumcheck.commitment import default_scheme
from piop.sumcheck.errors import ProtocolViolation
from piop.sumcheck.extrapolation import ExtrapolationTable
from piop.sumcheck.structs import Proof, append_aux_info, LABEL_CHALLENGE
from piop.sumcheck.prover import round as round_


logger = logging.getLogger(__name__)


class ProverState:
    """Prover 측 작업 상태.

    속성:
        challenges: 지금까지 받은 챌린지 (라운드 순서)
        round: 현재 라운드 번호 (0 ≤ round ≤ num_vars)
        oracle: 현재 (축약된) 오라클 — 라운드마다 새 객체로 교체됨
        extrapolation: 차수별 무게중심 가중치 테이블
        messages: 지금까지 보낸 ProverMessage
        scheme: 커밋 스킴 (기본값: ScalarScheme)
        max_workers: 라운드 내부 병렬화에 사용할 스레드 수 (None/1이면 순차)
    """

    def __init__(self, oracle, scheme=None, max_workers=None):
        if oracle.num_vars < 1:
            raise ValueError("변수가 없는 다항식(상수)은 sum-check로 증명할 수 없습니다")
        if oracle.max_degree < 1:
            raise ValueError(f"max_degree는 1 이상이어야 합니다: {oracle.max_degree}")

        self.num_vars = oracle.num_vars
        self.max_degree = oracle.max_degree
        self.scheme = default_scheme(scheme)
        self.max_workers = max_workers

        self.challenges = []
        self.round = 0
        self.oracle = oracle
        self.extrapolation = ExtrapolationTable(self.max_degree)
        self.messages = []
        self._awaiting_challenge = False

    @classmethod
    def initialize(cls, oracle, scheme=None, max_workers=None):
        """오라클에서 num_vars와 max_degree를 읽어 round = 0 상태를 만든다."""
        return cls(oracle, scheme=scheme, max_workers=max_workers)

    @property
    def finished(self):
        return self.round == self.num_vars

    def run_round(self):
        """현재 라운드 메시지를 계산하여 반환한다.

        Returns:
            ProverMessage: [g_i(0), ..., g_i(max_degree)] (커밋됨)

        Raises:
            ProtocolViolation: 이미 끝났거나 이전 메시지의 챌린지를 아직 받지 않았을 때
        """
        if self.finished:
            raise ProtocolViolation(
                f"모든 {self.num_vars} 라운드가 끝났습니다 (Finished 상태)"
            )
        if self._awaiting_challenge:
            raise ProtocolViolation(
                f"라운드 {self.round}의 챌린지를 받기 전에 run_round가 다시 호출되었습니다"
            )

        message = round_.execute(self)
        self.messages.append(message)
        self._awaiting_challenge = True
        logger.debug("prover round %d/%d: message emitted", self.round, self.num_vars)
        return message

    def receive_challenge(self, challenge):
        """챌린지를 기록하고 첫 자유 변수를 고정한 새 오라클로 넘어간다.

        Raises:
            ProtocolViolation: 대응하는 run_round 없이 호출되었을 때
        """
        if not self._awaiting_challenge:
            raise ProtocolViolation(
                f"라운드 {self.round}의 메시지를 보내기 전에 챌린지를 받았습니다"
            )
        challenge = to_fr(challenge)

        # 축약이 실패하면 상태는 그대로 남는다
        reduced = self.oracle.fix_first_variable(challenge)

        self.challenges.append(challenge)
        self.oracle = reduced
        self.round += 1
        self._awaiting_challenge = False

    def finalize(self):
        """num_vars 라운드가 모두 끝난 뒤 Proof를 조립한다.

        Raises:
            ProtocolViolation: 라운드가 남아 있을 때
        """
        if not self.finished:
            raise ProtocolViolation(
                f"라운드 {self.round}/{self.num_vars}에서 finalize가 호출되었습니다"
            )
        return Proof(self.challenges, self.messages)


def prove(oracle, transcript, scheme=None, max_workers=None):
    """Fiat-Shamir 트랜스크립트로 sum-check 증명을 생성한다.

    Args:
        oracle: SumcheckOracle (예: VirtualPolynomial)
        transcript: 이 세션이 소유하는 Transcript
        scheme: 커밋 스킴 (기본값: ScalarScheme)
        max_workers: 라운드 내부 병렬화 스레드 수

    Returns:
        Proof

    예시:
        >>> vp = VirtualPolynomial.from_mle(DenseMultilinearPolynomial(2, [1, 1, 1, 2]))
        >>> proof = prove(vp, Transcript())
        >>> len(proof.proofs)  # 2
    """
    state = ProverState.initialize(oracle, scheme=scheme, max_workers=max_workers)
    append_aux_info(transcript, state.num_vars, state.max_degree)

    for _ in range(state.num_vars):
        message = state.run_round()
        message.append_to_transcript(transcript, state.scheme)
        state.receive_challenge(transcript.challenge_scalar(LABEL_CHALLENGE))

    logger.info(
        "sum-check proof generated: num_vars=%d, max_degree=%d",
        state.num_vars, state.max_degree,
    )
    return state.finalize()
