# app/utils/test_datetime_utils.py
"""
시간 처리 유틸리티 테스트

사용법: python -m pytest app/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, timezone, timedelta
from app.utils.datetime_utils import DateTimeUtils, EPOCH


def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함


def test_parse_iso_datetime_invalid():
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("not-a-date")
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")


def test_ensure_utc_converts_offsets():
    kst = timezone(timedelta(hours=9))
    value = datetime(2024, 1, 15, 19, 30, tzinfo=kst)
    assert DateTimeUtils.ensure_utc(value) == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.ensure_utc(datetime(2024, 1, 15)).tzinfo == timezone.utc
    assert DateTimeUtils.ensure_utc(None) is None


def test_sort_key_orders_mixed_values():
    """Firestore 타임스탬프와 과거 ISO 문자열이 섞여 있어도 정렬할 수 있어야 함"""
    values = ["2024-01-02T00:00:00Z", datetime(2024, 1, 3, tzinfo=timezone.utc), None, "broken"]
    ordered = sorted(values, key=DateTimeUtils.sort_key, reverse=True)
    assert ordered[0] == values[1]
    assert ordered[1] == values[0]
    assert DateTimeUtils.sort_key(None) == EPOCH
    assert DateTimeUtils.sort_key("broken") == EPOCH
