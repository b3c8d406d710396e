"""
문서 식별자 생성 및 검증

상품/주문 ID는 32자리 소문자 16진수 문자열(UUID4 hex)입니다.
"""

import re
import uuid

from app.core.exceptions import InvalidIdentifierException

_ID_PATTERN = re.compile(r"[0-9a-f]{32}")


def new_id() -> str:
    """새 식별자를 생성합니다."""
    return uuid.uuid4().hex


def is_valid_id(value: object) -> bool:
    """
    식별자 형식이 올바른지 확인합니다.

    Example:
        >>> is_valid_id(new_id())
        True
        >>> is_valid_id("not-an-id")
        False
    """
    return isinstance(value, str) and _ID_PATTERN.fullmatch(value) is not None


def ensure_valid_id(value: str, kind: str = "ID") -> str:
    """
    식별자를 검증하고 그대로 반환합니다.

    Raises:
        InvalidIdentifierException: 형식이 잘못된 경우
    """
    if not is_valid_id(value):
        raise InvalidIdentifierException(value, kind)
    return value
