# app/models/follow.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from app.utils.datetime_utils import DateTimeUtils


@dataclass
class FollowGraphDoc:
    """
    Firestore 'followers/{user_id}', 'following/{user_id}' 문서 구조.
    - followers: 해당 사용자를 팔로우하는 사용자 ID 목록
    - following: 해당 사용자가 팔로우하는 사용자 ID 목록
    count는 항상 len(users)와 같아야 합니다.
    """
    users: List[str] = field(default_factory=list)
    count: int = 0
    last_updated: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_snapshot(cls, snapshot) -> 'FollowGraphDoc':
        """문서가 없으면 빈 목록으로 취급합니다. (첫 팔로우 시 지연 생성)"""
        if not snapshot.exists:
            return cls()
        data = snapshot.to_dict() or {}
        users = list(data.get('users') or [])
        return cls(users=users, count=len(users), last_updated=data.get('last_updated') or DateTimeUtils.now())


@dataclass
class FollowStatus:
    is_following: bool = False  # 내가 상대를 팔로우 중인지
    is_follower: bool = False   # 상대가 나를 팔로우 중인지
    is_mutual: bool = False


@dataclass
class FollowStats:
    follower_count: int = 0
    following_count: int = 0


@dataclass
class FollowResult:
    """팔로우/언팔로우 결과. 실패해도 예외 대신 success=False로 반환됩니다."""
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
