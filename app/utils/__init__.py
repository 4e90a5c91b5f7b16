# app/utils/__init__.py
"""
유틸리티 모듈 패키지

프로젝트 전체에서 공통으로 사용되는 시간 처리와 음성 합성용 텍스트 분할 기능을 포함합니다.
"""

from .datetime_utils import DateTimeUtils, now, ensure_utc
from .text_splitter import TextChunk, SplitStatistics, split_text_for_realtime_tts, analyze_split_result

__all__ = [
    'DateTimeUtils', 'now', 'ensure_utc',
    'TextChunk', 'SplitStatistics',
    'split_text_for_realtime_tts', 'analyze_split_result'
]
