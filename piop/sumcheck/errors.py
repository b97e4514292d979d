"""
Sum-check 오류 분류
====================

  ┌──────────────────────────┬──────────────────────────────────────────┐
  │  ProtocolViolation       │  엔진 메서드를 잘못된 순서로 호출 (프로그래머 오류) │
  │  DegreeBoundExceeded     │  메시지 길이 / 차수가 상한을 넘음 (잘못된 입력)   │
  │  ConsistencyCheckFailed  │  라운드 연결 검사 또는 최종 합 검사 실패 (거부)    │
  │  SerializationError      │  잘못된 바이트/JSON 입력 (부분 상태 변경 없음)     │
  └──────────────────────────┴──────────────────────────────────────────┘

정직한 Prover를 올바르게 구동하면 ProtocolViolation은 발생하지 않는다.
나머지 세 가지는 Verifier가 외부 입력에 대해 명시적으로 거부하는 경로이다.
"""


class SumcheckError(Exception):
    """sum-check 엔진의 모든 오류의 기반 클래스."""


class ProtocolViolation(SumcheckError, RuntimeError):
    """상태 기계가 허용하지 않는 순서로 메서드가 호출되었다."""


class DegreeBoundExceeded(SumcheckError, ValueError):
    """라운드 메시지의 길이 또는 다항식 차수가 max_degree를 넘는다."""


class ConsistencyCheckFailed(SumcheckError, ValueError):
    """연결 불변식(linking invariant) 또는 최종 평가 검사가 실패했다.

    속성:
        round: 실패한 라운드 번호 (알 수 없으면 None)
    """

    def __init__(self, message, round=None):
        super().__init__(message)
        self.round = round


class SerializationError(SumcheckError, ValueError):
    """정규 인코딩이 아닌 바이트열 또는 JSON 데이터."""
