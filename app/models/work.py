# app/models/work.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from app.utils.datetime_utils import DateTimeUtils


class AgeFilter(Enum):
    """피드에 적용되는 연령 제한 필터 (사용자 설정값)"""
    ALL = "all"                   # 18+ 작품 제외
    R18_ALLOWED = "r18-allowed"   # 필터링 없음
    R18_ONLY = "r18-only"         # 18+ 작품만


R18_RATING = "18+"


@dataclass
class Work:
    """
    Firestore 'works' 컬렉션 문서 중 소셜 기능에 필요한 부분.
    like_count, comment_count는 좋아요/댓글 서비스의 트랜잭션에서만 변경됩니다.
    """
    work_id: str
    uid: str
    title: str = ''
    username: str = ''
    display_name: str = ''
    like_count: int = 0
    comment_count: int = 0
    content_rating: str = 'all'
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, work_id: str, data: Dict[str, Any]) -> 'Work':
        return cls(
            work_id=work_id,
            uid=data.get('uid') or '',
            title=data.get('title') or '',
            username=data.get('username') or '',
            display_name=data.get('display_name') or '',
            like_count=max(0, int(data.get('like_count') or 0)),
            comment_count=max(0, int(data.get('comment_count') or 0)),
            content_rating=data.get('content_rating') or 'all',
            audio_url=data.get('audio_url'),
            image_url=data.get('image_url'),
            created_at=DateTimeUtils.sort_key(data.get('created_at')),
            updated_at=data.get('updated_at')
        )


@dataclass
class FeedResult:
    """
    팔로우 피드 결과.
    has_feeds=False는 '팔로우한 사용자가 없음', has_feeds=True + 빈 works는 '팔로우는 있지만 작품이 없음'.
    """
    works: List[Work] = field(default_factory=list)
    has_feeds: bool = False
