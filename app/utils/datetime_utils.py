# app/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간 처리를 위한 유틸리티 모듈

- 모든 시각은 UTC timezone-aware datetime으로 다룹니다.
- Firestore에서 읽은 타임스탬프(DatetimeWithNanoseconds), naive datetime,
  과거 클라이언트가 저장한 ISO 문자열을 같은 기준으로 비교할 수 있게 정규화합니다.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

# 정렬 시 created_at이 없는 문서가 가장 뒤로 가도록 사용하는 기준 시각
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DateTimeUtils:
    """시간 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """ISO 포맷 문자열을 UTC datetime으로 파싱합니다. ('Z' 접미사 지원)"""
        if not iso_string:
            raise ValueError("빈 문자열은 파싱할 수 없습니다")
        try:
            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'
            dt = dateutil_parser.isoparse(iso_string)
        except (ValueError, OverflowError) as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")
        return DateTimeUtils.ensure_utc(dt)

    @staticmethod
    def ensure_utc(value: Any) -> Optional[datetime]:
        """
        datetime 또는 ISO 문자열을 UTC timezone-aware datetime으로 변환합니다.
        timezone 정보가 없는 값은 UTC로 간주합니다. None은 그대로 None을 반환합니다.
        """
        if value is None:
            return None
        if isinstance(value, str):
            return DateTimeUtils.parse_iso_datetime(value)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        raise ValueError(f"지원하지 않는 시간 타입입니다: {type(value).__name__}")

    @staticmethod
    def sort_key(value: Any) -> datetime:
        """최신순 정렬용 키. 값이 없거나 해석할 수 없으면 EPOCH를 사용합니다."""
        try:
            return DateTimeUtils.ensure_utc(value) or EPOCH
        except ValueError:
            return EPOCH


# 편의 함수
now = DateTimeUtils.now
ensure_utc = DateTimeUtils.ensure_utc
