"""숫자 변환 유틸리티."""
import math
import re
from decimal import Decimal
from typing import Any, Union

Number = Union[int, float]

# 부호, 소수점, 지수만 허용 ("1,234", "1_000", "nan", "0x10" 등은 불가)
_NUMERIC_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def to_number(raw: Any) -> Number:
    """원본 값을 숫자로 변환. 변환 불가/무한대/NaN이면 0.

    - bool, None, dict 등 숫자가 아닌 타입 → 0
    - 문자열은 앞뒤 공백만 허용, 천 단위 구분자(",")나 "_"가 있으면 0
    - 정수로 떨어지는 값은 int로 반환

    Examples:
        >>> to_number(" 1234 ")
        1234
        >>> to_number("1,234")
        0
        >>> to_number(float("nan"))
        0
    """
    if isinstance(raw, bool):
        return 0

    if isinstance(raw, (int, float, Decimal)):
        try:
            value = float(raw)
        except (ValueError, OverflowError):
            return 0
    elif isinstance(raw, str):
        text = raw.strip()
        if not _NUMERIC_RE.fullmatch(text):
            return 0
        value = float(text)
    else:
        return 0

    if not math.isfinite(value):
        return 0
    if value.is_integer():
        return int(value)
    return value


def is_positive_finite(value: Any) -> bool:
    """유한한 양수인지."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0
