# app/models/user.py
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class UserProfile:
    """
    Firestore 'users' 컬렉션의 공개 프로필 요약.
    팔로워 목록, 댓글 작성자 정보 등에 사용됩니다.
    """
    uid: str
    username: str
    display_name: str
    photo_url: Optional[str] = None
    bio: Optional[str] = None

    @classmethod
    def from_dict(cls, uid: str, data: Dict[str, Any]) -> 'UserProfile':
        return cls(
            uid=uid,
            username=data.get('username') or '',
            display_name=data.get('display_name') or data.get('username') or '',
            photo_url=data.get('photo_url'),
            bio=data.get('bio')
        )
