"""
Sum-check 공유 자료구조
========================

Prover와 Verifier가 주고받는 데이터와 세션 결과를 정의한다.

**Proof**:
  - proofs: 라운드마다 Prover가 보낸 메시지 (num_vars개)
  - point: 트랜스크립트가 생성한 챌린지 (r₀, ..., r_{n-1}) — 최종 평가 점

**ProverMessage**:
  라운드 다항식 gᵢ(X)의 평가 표현 [gᵢ(0), gᵢ(1), ..., gᵢ(max_degree)].
  각 평가값은 커밋된 값(스칼라 또는 G1 점)이다.

**SubClaim**:
  sum-check가 축약한 단일 평가 주장 "g(point) = expected_evaluation".
  외부 오라클 열기 검사가 이 주장을 확인한다.

**와이어 포맷** (Proof.to_bytes):
  ┌──────────────────────────────────────────────────────────┐
  │  point:   num_vars × 32바이트 스칼라 (라운드 순서)            │
  │  proofs:  num_vars × (max_degree + 1) × 인코딩된 커밋 값      │
  └──────────────────────────────────────────────────────────┘
  원소 하나의 크기는 커밋 스킴(scheme.encoded_size)이 정한다.
"""

import enum

from piop.sumcheck.field import SCALAR_SIZE, to_fr, scalar_to_bytes, scalar_from_bytes
from piop.sumcheck.errors import (
    ConsistencyCheckFailed, DegreeBoundExceeded, SerializationError,
)


# 트랜스크립트 레이블
LABEL_NUM_VARS = b"num_vars"
LABEL_MAX_DEGREE = b"max_degree"
LABEL_PROVER_MSG = b"prover_msg"
LABEL_CHALLENGE = b"round_challenge"


def append_aux_info(transcript, num_vars, max_degree):
    """세션 시작 시 num_vars와 max_degree를 트랜스크립트에 흡수한다."""
    transcript.append_u64(LABEL_NUM_VARS, num_vars)
    transcript.append_u64(LABEL_MAX_DEGREE, max_degree)


class ProverMessage:
    """한 라운드의 Prover 메시지 (평가 표현의 단변수 다항식).

    속성:
        evaluations: 커밋된 값의 튜플 [g(0), ..., g(max_degree)]
    """

    def __init__(self, evaluations):
        self.evaluations = tuple(evaluations)

    def __len__(self):
        return len(self.evaluations)

    def to_bytes(self, scheme):
        return b"".join(scheme.encode(v) for v in self.evaluations)

    @classmethod
    def from_bytes(cls, data, max_degree, scheme):
        size = scheme.encoded_size
        if len(data) != size * (max_degree + 1):
            raise SerializationError(
                f"메시지 인코딩은 {size * (max_degree + 1)}바이트여야 합니다: {len(data)}"
            )
        return cls(
            scheme.decode(data[i * size:(i + 1) * size])
            for i in range(max_degree + 1)
        )

    def append_to_transcript(self, transcript, scheme):
        """메시지를 트랜스크립트에 흡수한다 (Prover와 Verifier가 같은 순서로 호출)."""
        transcript.append_bytes(LABEL_PROVER_MSG, self.to_bytes(scheme))

    def __eq__(self, other):
        if not isinstance(other, ProverMessage):
            return NotImplemented
        return self.evaluations == other.evaluations

    def __repr__(self):
        return f"ProverMessage({list(self.evaluations)!r})"


class Proof:
    """sum-check 증명: 라운드 메시지와 최종 평가 점.

    세션 종료 시 한 번 만들어지며 이후에는 변경되지 않는다 (튜플로 보관).

    속성:
        point: FR 튜플 (r₀, ..., r_{n-1})
        proofs: ProverMessage 튜플
    """

    def __init__(self, point, proofs):
        self.point = tuple(to_fr(r) for r in point)
        self.proofs = tuple(proofs)

    @property
    def num_vars(self):
        return len(self.proofs)

    def extract_sum(self, scheme):
        """첫 라운드 메시지로부터 주장값 g₀(0) + g₀(1)을 꺼낸다 (커밋된 값)."""
        if not self.proofs:
            raise ConsistencyCheckFailed("라운드 메시지가 없는 증명입니다")
        first = self.proofs[0].evaluations
        if len(first) < 2:
            raise DegreeBoundExceeded("라운드 메시지에는 평가값이 2개 이상 있어야 합니다")
        return scheme.add(first[0], first[1])

    def to_bytes(self, scheme):
        """와이어 포맷으로 인코딩한다."""
        out = bytearray()
        for r in self.point:
            out.extend(scalar_to_bytes(r))
        for message in self.proofs:
            out.extend(message.to_bytes(scheme))
        return bytes(out)

    @classmethod
    def from_bytes(cls, data, num_vars, max_degree, scheme):
        """와이어 포맷을 디코딩한다.

        길이가 정확히 맞는지 먼저 확인하고, 모든 원소를 디코딩한 뒤에만
        Proof를 만든다 (실패 시 부분 객체 없음).

        Raises:
            SerializationError: 길이 불일치 또는 비정규 원소
        """
        data = bytes(data)
        message_size = scheme.encoded_size * (max_degree + 1)
        expected = num_vars * SCALAR_SIZE + num_vars * message_size
        if len(data) != expected:
            raise SerializationError(
                f"증명 인코딩은 {expected}바이트여야 합니다: {len(data)}"
            )
        point = [
            scalar_from_bytes(data[i * SCALAR_SIZE:(i + 1) * SCALAR_SIZE])
            for i in range(num_vars)
        ]
        offset = num_vars * SCALAR_SIZE
        proofs = []
        for i in range(num_vars):
            start = offset + i * message_size
            proofs.append(
                ProverMessage.from_bytes(data[start:start + message_size], max_degree, scheme)
            )
        return cls(point, proofs)

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return self.point == other.point and self.proofs == other.proofs

    def __repr__(self):
        return f"Proof(point={[int(r) for r in self.point]}, proofs={list(self.proofs)!r})"


class SubClaim:
    """sum-check가 축약한 평가 주장: g(point) = expected_evaluation.

    속성:
        point: FR 리스트 (Verifier 챌린지, 라운드 순서)
        expected_evaluation: 커밋된 값
    """

    def __init__(self, point, expected_evaluation):
        self.point = list(point)
        self.expected_evaluation = expected_evaluation

    def check_evaluation(self, value, scheme):
        """외부에서 얻은 오라클 평가값이 주장과 일치하는지 확인한다.

        Args:
            value: g(point)의 스칼라 값
            scheme: 세션에서 사용한 커밋 스킴

        Raises:
            ConsistencyCheckFailed: 불일치할 때
        """
        if not scheme.equal(scheme.commit(value), self.expected_evaluation):
            raise ConsistencyCheckFailed("최종 평가값이 sum-check 주장과 다릅니다")
        return True


class Verdict(enum.Enum):
    """검증 결과 분류."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"    # 올바르게 실행되었으나 증명이 거부됨
    MALFORMED = "malformed"  # 입력 형식 자체가 잘못됨


class VerificationResult:
    """verifier.check()의 결과 값.

    속성:
        verdict: Verdict
        subclaim: ACCEPTED일 때만 SubClaim, 그 외에는 None
        error: 거부 사유가 된 예외 (ACCEPTED면 None)
    """

    def __init__(self, verdict, subclaim=None, error=None):
        self.verdict = verdict
        self.subclaim = subclaim
        self.error = error

    @property
    def accepted(self):
        return self.verdict is Verdict.ACCEPTED

    def __bool__(self):
        return self.accepted

    def __repr__(self):
        return f"VerificationResult({self.verdict.name}, error={self.error!r})"
