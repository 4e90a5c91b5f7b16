# app/api/users/services.py
import logging
from typing import Optional, List, Iterable

from firebase_admin import firestore

from app.models.user import UserProfile
from app.services.firestore_service import get_documents


class UserService:
    """
    사용자 공개 프로필 조회를 담당하는 서비스 클래스.
    팔로워/팔로잉 목록, 댓글 작성자 정보 구성에 사용됩니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        """uid로 공개 프로필을 조회합니다. 없으면 None을 반환합니다."""
        doc = self.users_ref.document(uid).get()
        if not doc.exists:
            return None
        return UserProfile.from_dict(uid, doc.to_dict() or {})

    def get_profiles(self, uids: Iterable[str]) -> List[UserProfile]:
        """
        여러 사용자의 프로필을 한 번의 배치 조회로 가져옵니다.
        요청한 순서를 유지하며, 프로필이 없는 사용자(탈퇴 등)는 건너뜁니다.
        """
        uids = list(uids)
        found = get_documents(self.db, 'users', uids)
        missing = len(set(uids)) - len(found)
        if missing:
            logging.info(f"프로필이 없는 사용자 {missing}명을 목록에서 제외합니다.")
        profiles = []
        for uid in dict.fromkeys(uids):
            if uid in found:
                profiles.append(UserProfile.from_dict(uid, found[uid]))
        return profiles
