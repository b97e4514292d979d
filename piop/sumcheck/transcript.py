"""
Sum-check Fiat-Shamir Transcript
=================================

비대화식(non-interactive) 변환을 위한 Fiat-Shamir 해싱 구현.

**Fiat-Shamir 변환이란?**
  원래 sum-check는 대화식(interactive) 프로토콜이다:
  - Prover가 라운드 다항식 gᵢ(X)를 보내면
  - Verifier가 랜덤 챌린지 rᵢ를 보내고
  - Prover가 변수 하나를 rᵢ로 고정한 뒤 다음 라운드를 진행한다

  Fiat-Shamir 변환은 이 대화를 해시 함수로 시뮬레이션한다:
  - Prover가 지금까지의 모든 메시지를 해시하여 챌린지를 직접 생성
  - Verifier도 같은 방식으로 챌린지를 재구성
  - 해시의 랜덤 오라클 모델 하에서 보안성이 보장됨

**sum-check 세션의 흡수 순서**:
  b"num_vars", b"max_degree"          (세션 시작, aux info)
  b"prover_msg" → b"round_challenge"  (라운드마다 반복, num_vars회)

하나의 세션은 하나의 Transcript 인스턴스를 소유한다 (전역 상태 없음).

사용 예시:
    >>> t = Transcript()
    >>> t.append_bytes(b"prover_msg", msg_bytes)
    >>> r = t.challenge_scalar(b"round_challenge")
"""

import hashlib
from piop.sumcheck.field import FR, CURVE_ORDER, scalar_to_bytes, g1_to_bytes


DEFAULT_LABEL = b"sumcheck"


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    해시 상태를 누적하여 결정론적이면서 예측 불가능한 챌린지를 생성한다.
    Prover와 Verifier가 동일한 순서로 데이터를 추가하면
    동일한 챌린지가 생성된다.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열

    보안 주의:
        - 모든 데이터는 레이블(label)과 함께 추가하여 도메인 분리(domain separation) 보장
        - 가변 길이 데이터는 길이를 함께 흡수한다
        - 트랜스크립트 순서가 다르면 다른 챌린지가 생성됨
    """

    def __init__(self, label=DEFAULT_LABEL):
        """트랜스크립트를 초기화한다.

        Args:
            label: 프로토콜 도메인 분리용 레이블 (기본값: b"sumcheck")
        """
        self.state = bytearray()
        self.state.extend(label)

    def copy(self):
        """현재 상태를 복제한 새 트랜스크립트를 반환한다."""
        t = Transcript.__new__(Transcript)
        t.state = bytearray(self.state)
        return t

    def append_bytes(self, label, data):
        """가변 길이 바이트열을 길이 접두사와 함께 추가한다.

        Args:
            label: 바이트열 레이블 (예: b"prover_msg")
            data: 인코딩된 원소들의 바이트열
        """
        data = bytes(data)
        self.state.extend(label)
        self.state.extend(len(data).to_bytes(8, "big"))
        self.state.extend(data)

    def append_u64(self, label, value):
        """부호 없는 64비트 정수를 추가한다 (num_vars, max_degree 등)."""
        self.state.extend(label)
        self.state.extend(int(value).to_bytes(8, "big"))

    def append_scalar(self, label, scalar):
        """FR 스칼라 값을 32바이트 빅엔디안으로 추가한다."""
        self.state.extend(label)
        self.state.extend(scalar_to_bytes(scalar))

    def append_point(self, label, point):
        """G1 점을 추가한다. 무한원점(None)은 64바이트의 0으로 흡수된다."""
        self.state.extend(label)
        self.state.extend(g1_to_bytes(point))

    def challenge_scalar(self, label):
        """트랜스크립트로부터 챌린지 스칼라를 생성한다.

        현재 상태를 SHA-256으로 해싱하여 FR 원소를 도출한다.
        생성된 해시는 자동으로 트랜스크립트에 추가된다 (체이닝).

        Args:
            label: 바이트열 레이블 (예: b"round_challenge")

        Returns:
            FR: 챌린지 스칼라
        """
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        challenge = FR(int.from_bytes(h, "big") % CURVE_ORDER)

        # 챌린지를 상태에 추가 (체이닝: 다음 챌린지에 영향)
        self.state.extend(h)

        return challenge
