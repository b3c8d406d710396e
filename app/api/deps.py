"""
FastAPI 의존성 주입 함수들

데이터베이스 세션, 설정, 페이지네이션 파라미터 등의 의존성을 제공합니다.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Query

from app.core.config import Settings, get_settings
from app.db.database import get_db

__all__ = ["get_db", "get_pagination", "parse_positive_int", "Pagination"]


def parse_positive_int(value: Optional[str], default: int) -> int:
    """
    쿼리 문자열을 1 이상의 정수로 변환합니다.

    값이 없거나 숫자가 아니면 기본값을 사용합니다. 목록 조회는 잘못된
    페이지 파라미터 때문에 실패하지 않습니다.

    Example:
        >>> parse_positive_int("3", 1)
        3
        >>> parse_positive_int("0", 1)
        1
        >>> parse_positive_int("abc", 10)
        10
    """
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return max(parsed, 1)


@dataclass
class Pagination:
    """페이지 번호와 페이지 크기"""

    page: int
    limit: int


def get_pagination(
    page: Optional[str] = Query(None, description="페이지 번호 (1부터)"),
    limit: Optional[str] = Query(None, description="페이지 크기"),
    settings: Settings = Depends(get_settings),
) -> Pagination:
    """
    page/limit 쿼리 파라미터를 관대하게 파싱하는 의존성 함수

    Returns:
        Pagination: page >= 1, 1 <= limit <= max_page_size
    """
    return Pagination(
        page=parse_positive_int(page, 1),
        limit=min(
            parse_positive_int(limit, settings.default_page_size),
            settings.max_page_size,
        ),
    )
