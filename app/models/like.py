# app/models/like.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from app.utils.datetime_utils import DateTimeUtils


@dataclass
class LikeRecord:
    """
    Firestore 'likes/{user_id}' 문서 구조. 사용자 한 명당 문서 하나.
    liked_work_ids에 있는 작품은 반드시 해당 작품의 like_count에 반영되어 있어야 합니다.
    """
    uid: str
    liked_work_ids: List[str] = field(default_factory=list)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_snapshot(cls, uid: str, snapshot) -> 'LikeRecord':
        if not snapshot.exists:
            return cls(uid=uid)
        data = snapshot.to_dict() or {}
        return cls(
            uid=uid,
            liked_work_ids=list(data.get('liked_work_ids') or []),
            updated_at=data.get('updated_at') or DateTimeUtils.now()
        )


@dataclass
class LikeResult:
    success: bool
    is_liked: bool = False
    new_like_count: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None
