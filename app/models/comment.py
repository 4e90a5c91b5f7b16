# app/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from app.utils.datetime_utils import DateTimeUtils


@dataclass
class CommentAuthor:
    """댓글 작성 시 함께 저장되는 작성자 정보."""
    uid: str
    username: str
    display_name: str
    photo_url: Optional[str] = None


@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    comment_id: str
    work_id: str
    uid: str
    username: str
    display_name: str
    content: str
    user_photo_url: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: Optional[datetime] = None


@dataclass
class CommentResult:
    success: bool
    comment_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
