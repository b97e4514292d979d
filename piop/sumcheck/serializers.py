"""
Sum-check 데이터 직렬화/역직렬화 헬퍼
=======================================

JSON으로 저장하거나 전송할 수 있는 형태로 sum-check 객체를 변환한다.
FR, G1, ProverMessage, Proof.

순서와 개수는 와이어 포맷(Proof.to_bytes)과 같고,
원소는 10진 문자열로 표현한다.

    {
        "scheme": "bn128-g1",
        "point": ["r0", "r1", ...],
        "proofs": [[<원소>, ...], ...]
    }
"""

import logging

from py_ecc.fields import bn128_FQ as FQ

from piop.sumcheck.field import FR, CURVE_ORDER, FIELD_MODULUS, is_on_g1
from piop.sumcheck.errors import SerializationError
from piop.sumcheck.structs import Proof, ProverMessage


logger = logging.getLogger(__name__)


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def _parse_decimal(s, what):
    # 10진 숫자 문자열만 받는다 (float, bool, 부호, 공백 거부)
    if not isinstance(s, str) or not (s.isascii() and s.isdigit()):
        raise SerializationError(f"{what}는 10진 문자열이어야 합니다: {s!r}")
    return int(s)


def deserialize_fr(s):
    """str(int) → FR (범위를 벗어나면 SerializationError)"""
    value = _parse_decimal(s, "스칼라")
    if not 0 <= value < CURVE_ORDER:
        raise SerializationError(f"스칼라 값이 범위를 벗어났습니다: {s!r}")
    return FR(value)


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point (곡선 위의 점인지 확인)"""
    if data is None:
        return None
    if not isinstance(data, list) or len(data) != 2:
        raise SerializationError(f"G1 좌표 쌍이 아닙니다: {data!r}")
    x, y = (_parse_decimal(c, "G1 좌표") for c in data)
    if not (0 <= x < FIELD_MODULUS and 0 <= y < FIELD_MODULUS):
        raise SerializationError("G1 좌표가 기저 필드 범위를 벗어났습니다")
    point = (FQ(x), FQ(y))
    if not is_on_g1(point):
        raise SerializationError("G1 점이 곡선 위에 있지 않습니다")
    return point


_ELEMENT_CODECS = {
    "scalar": (serialize_fr, deserialize_fr),
    "bn128-g1": (serialize_g1, deserialize_g1),
}


def _codec(scheme):
    try:
        return _ELEMENT_CODECS[scheme.name]
    except KeyError:
        raise SerializationError(f"지원하지 않는 커밋 스킴입니다: {scheme.name!r}") from None


# ─── ProverMessage ───

def serialize_message(message, scheme):
    """ProverMessage → list"""
    encode, _ = _codec(scheme)
    return [encode(v) for v in message.evaluations]


def deserialize_message(data, max_degree, scheme):
    """list → ProverMessage (길이는 max_degree + 1)"""
    _, decode = _codec(scheme)
    if not isinstance(data, list) or len(data) != max_degree + 1:
        raise SerializationError(
            f"라운드 메시지는 원소 {max_degree + 1}개의 리스트여야 합니다"
        )
    return ProverMessage([decode(v) for v in data])


# ─── Proof ───

def serialize_proof(proof, scheme):
    """Proof → dict"""
    return {
        "scheme": scheme.name,
        "point": [serialize_fr(r) for r in proof.point],
        "proofs": [serialize_message(m, scheme) for m in proof.proofs],
    }


def deserialize_proof(data, num_vars, max_degree, scheme):
    """dict → Proof

    Raises:
        SerializationError: 스킴 이름, 개수, 원소 중 하나라도 맞지 않을 때
    """
    if not isinstance(data, dict):
        raise SerializationError("증명 데이터는 dict여야 합니다")
    if data.get("scheme") != scheme.name:
        raise SerializationError(
            f"커밋 스킴이 다릅니다: {data.get('scheme')!r} != {scheme.name!r}"
        )
    point = data.get("point")
    proofs = data.get("proofs")
    if not isinstance(point, list) or len(point) != num_vars:
        raise SerializationError(f"평가 점은 스칼라 {num_vars}개의 리스트여야 합니다")
    if not isinstance(proofs, list) or len(proofs) != num_vars:
        raise SerializationError(f"라운드 메시지는 {num_vars}개여야 합니다")

    proof = Proof(
        [deserialize_fr(r) for r in point],
        [deserialize_message(m, max_degree, scheme) for m in proofs],
    )
    logger.debug("deserialized proof: num_vars=%d, max_degree=%d", num_vars, max_degree)
    return proof
