"""
Sum-check 기반 모듈: 유한체(Finite Field) 및 G1 그룹 연산
===========================================================

이 모듈은 sum-check 프로토콜 전체에서 사용되는 기본 대수적 도구를 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드 (scalar field).
  다중선형 다항식의 평가값, 라운드 챌린지, 평가 점(point)이 모두 FR 원소이다.
  - 위수(order) p ≈ 2^254, 소수체(prime field)

**G1 그룹 연산**:
  라운드 메시지의 평가값을 커밋먼트(v·G1)로 실어 보낼 때 사용한다.
  커밋먼트는 덧셈 동형(additively homomorphic)이므로
  Verifier는 평가값을 모른 채로 라운드 간 연결 검사를 수행할 수 있다.

**정규 바이트 인코딩**:
  FR 원소는 32바이트 빅엔디안, G1 점은 x‖y (각 32바이트)로 인코딩한다.
  무한원점(항등원)은 64바이트의 0이다.

사용 예시:
    >>> from piop.sumcheck.field import FR, G1, ec_mul
    >>> a = FR(3)
    >>> b = FR(7)
    >>> c = a * b        # FR(21)
    >>> P = ec_mul(G1, 5)  # 5·G1
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128

from piop.sumcheck.errors import SerializationError


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    bn128.curve_order (≈ 2^254) 위의 모듈러 산술을 지원한다.
    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    주의:
        py_ecc는 0의 역원을 0으로 돌려준다. 0으로 나누는 경우는
        호출하는 쪽에서 미리 걸러야 한다.
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (스칼라 필드 크기)
CURVE_ORDER = bn128.curve_order

# 기저 필드 크기 (G1 좌표의 범위)
FIELD_MODULUS = bn128.field_modulus

# 스칼라 하나의 정규 인코딩 길이
SCALAR_SIZE = 32


def to_fr(value):
    """정수 또는 FR 원소를 FR로 변환한다."""
    if isinstance(value, FR):
        return value
    return FR(int(value))


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# G1 그룹 생성자 (generator)
G1 = bn128.G1

# 영점 (point at infinity) - 항등원
Z1 = None  # bn128에서 G1의 항등원은 None으로 표현


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    Args:
        point: G1 위의 점 (None이면 항등원)
        scalar: 정수 또는 FR 원소

    Returns:
        scalar · point

    예시:
        >>> P = ec_mul(G1, FR(5))  # 5·G1
    """
    if point is None:
        return None
    scalar = int(scalar) % CURVE_ORDER
    if scalar == 0:
        return None
    return bn128.multiply(point, scalar)


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원 (negation): -point."""
    return bn128.neg(point)


def is_on_g1(point):
    """점이 bn128 G1 곡선 y² = x³ + 3 위에 있는지 확인한다."""
    return bn128.is_on_curve(point, bn128.b)


# ─────────────────────────────────────────────────────────────────────
# 정규 바이트 인코딩
# ─────────────────────────────────────────────────────────────────────

def scalar_to_bytes(scalar):
    """FR 원소를 32바이트 빅엔디안으로 인코딩한다."""
    return (int(scalar) % CURVE_ORDER).to_bytes(SCALAR_SIZE, "big")


def scalar_from_bytes(data):
    """32바이트 빅엔디안을 FR 원소로 디코딩한다.

    Raises:
        SerializationError: 길이가 32가 아니거나 값이 CURVE_ORDER 이상일 때
            (정규 인코딩이 아닌 입력은 거부한다)
    """
    data = bytes(data)
    if len(data) != SCALAR_SIZE:
        raise SerializationError(
            f"스칼라 인코딩은 {SCALAR_SIZE}바이트여야 합니다: {len(data)}"
        )
    value = int.from_bytes(data, "big")
    if value >= CURVE_ORDER:
        raise SerializationError("스칼라 값이 곡선 위수 이상입니다 (비정규 인코딩)")
    return FR(value)


def g1_to_bytes(point):
    """G1 점을 x‖y 64바이트로 인코딩한다. 무한원점은 64바이트의 0."""
    if point is None:
        return b"\x00" * (2 * SCALAR_SIZE)
    x, y = point
    return int(x).to_bytes(SCALAR_SIZE, "big") + int(y).to_bytes(SCALAR_SIZE, "big")


def g1_from_bytes(data):
    """x‖y 64바이트를 G1 점으로 디코딩한다.

    Raises:
        SerializationError: 길이가 맞지 않거나, 좌표가 기저 필드 범위를 벗어나거나,
            점이 곡선 위에 있지 않을 때
    """
    data = bytes(data)
    if len(data) != 2 * SCALAR_SIZE:
        raise SerializationError(
            f"G1 점 인코딩은 {2 * SCALAR_SIZE}바이트여야 합니다: {len(data)}"
        )
    x = int.from_bytes(data[:SCALAR_SIZE], "big")
    y = int.from_bytes(data[SCALAR_SIZE:], "big")
    if x == 0 and y == 0:
        return None
    if x >= FIELD_MODULUS or y >= FIELD_MODULUS:
        raise SerializationError("G1 좌표가 기저 필드 범위를 벗어났습니다")
    point = (FQ(x), FQ(y))
    if not is_on_g1(point):
        raise SerializationError("G1 점이 곡선 위에 있지 않습니다")
    return point
