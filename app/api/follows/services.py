# app/api/follows/services.py
import logging
from typing import List

from firebase_admin import firestore

from app.core.errors import ServiceError, NotFoundError, InvalidOperationError
from app.models.follow import FollowGraphDoc, FollowStatus, FollowStats, FollowResult
from app.models.user import UserProfile
from app.api.users.services import UserService
from app.services.firestore_service import run_in_transaction, DEFAULT_TRANSACTION_ATTEMPTS
from app.utils.datetime_utils import DateTimeUtils


class FollowService:
    """
    팔로우 관계를 관리하는 서비스 클래스.

    관계 하나는 두 문서에 나뉘어 저장됩니다.
    - following/{팔로우하는 사람}.users 에 대상 ID
    - followers/{팔로우 대상}.users 에 팔로우하는 사람 ID
    두 문서는 항상 같은 트랜잭션에서 함께 갱신되며, count는 len(users)로 다시 계산합니다.
    """
    def __init__(self, user_service: UserService, db=None, max_attempts: int = DEFAULT_TRANSACTION_ATTEMPTS):
        self.db = db or firestore.client()
        self.user_service = user_service
        self.followers_ref = self.db.collection('followers')
        self.following_ref = self.db.collection('following')
        self.users_ref = self.db.collection('users')
        self.max_attempts = max_attempts

    # --- 팔로우 / 언팔로우 ---
    def follow(self, follower_id: str, target_id: str) -> FollowResult:
        """
        follower_id가 target_id를 팔로우합니다.
        이미 팔로우 중이면 아무것도 바꾸지 않고 성공으로 처리합니다. (카운트 중복 증가 없음)
        """
        if follower_id == target_id:
            return self._failure(InvalidOperationError("자기 자신은 팔로우할 수 없습니다."))

        try:
            changed = run_in_transaction(
                self.db, self._follow_in_transaction, follower_id, target_id,
                max_attempts=self.max_attempts
            )
            if changed:
                logging.info(f"팔로우 완료: {follower_id} -> {target_id}")
            return FollowResult(success=True)
        except ServiceError as e:
            return self._failure(e)
        except Exception as e:
            logging.error(f"팔로우 처리 실패 ({follower_id} -> {target_id}): {e}", exc_info=True)
            return FollowResult(success=False, error="팔로우 처리 중 오류가 발생했습니다.", error_code="FOLLOW_FAILED")

    def unfollow(self, follower_id: str, target_id: str) -> FollowResult:
        """팔로우를 해제합니다. 팔로우 관계가 없었다면 아무것도 하지 않고 성공으로 처리합니다."""
        if follower_id == target_id:
            return self._failure(InvalidOperationError("자기 자신의 팔로우는 해제할 수 없습니다."))

        try:
            changed = run_in_transaction(
                self.db, self._unfollow_in_transaction, follower_id, target_id,
                max_attempts=self.max_attempts
            )
            if changed:
                logging.info(f"언팔로우 완료: {follower_id} -> {target_id}")
            return FollowResult(success=True)
        except ServiceError as e:
            return self._failure(e)
        except Exception as e:
            logging.error(f"언팔로우 처리 실패 ({follower_id} -> {target_id}): {e}", exc_info=True)
            return FollowResult(success=False, error="팔로우 해제 중 오류가 발생했습니다.", error_code="UNFOLLOW_FAILED")

    def _follow_in_transaction(self, transaction, follower_id: str, target_id: str) -> bool:
        # 트랜잭션에서는 모든 읽기가 쓰기보다 먼저 와야 합니다.
        target_snapshot = self.users_ref.document(target_id).get(transaction=transaction)
        following_doc_ref = self.following_ref.document(follower_id)
        followers_doc_ref = self.followers_ref.document(target_id)
        following = FollowGraphDoc.from_snapshot(following_doc_ref.get(transaction=transaction))
        followers = FollowGraphDoc.from_snapshot(followers_doc_ref.get(transaction=transaction))

        if not target_snapshot.exists:
            raise NotFoundError("팔로우할 사용자를 찾을 수 없습니다.")

        changed = False
        if target_id not in following.users:
            following.users.append(target_id)
            changed = True
        if follower_id not in followers.users:
            followers.users.append(follower_id)
            changed = True

        if changed:
            now = DateTimeUtils.now()
            transaction.set(following_doc_ref, self._graph_payload(following.users, now))
            transaction.set(followers_doc_ref, self._graph_payload(followers.users, now))
        return changed

    def _unfollow_in_transaction(self, transaction, follower_id: str, target_id: str) -> bool:
        following_doc_ref = self.following_ref.document(follower_id)
        followers_doc_ref = self.followers_ref.document(target_id)
        following_snapshot = following_doc_ref.get(transaction=transaction)
        followers_snapshot = followers_doc_ref.get(transaction=transaction)
        following = FollowGraphDoc.from_snapshot(following_snapshot)
        followers = FollowGraphDoc.from_snapshot(followers_snapshot)

        changed = False
        now = DateTimeUtils.now()
        # 문서는 삭제하지 않고 관계만 제거합니다. (빈 목록으로 유지)
        if target_id in following.users:
            remaining = [uid for uid in following.users if uid != target_id]
            transaction.set(following_doc_ref, self._graph_payload(remaining, now))
            changed = True
        if follower_id in followers.users:
            remaining = [uid for uid in followers.users if uid != follower_id]
            transaction.set(followers_doc_ref, self._graph_payload(remaining, now))
            changed = True
        return changed

    @staticmethod
    def _graph_payload(users: List[str], now) -> dict:
        return {'users': users, 'count': len(users), 'last_updated': now}

    @staticmethod
    def _failure(error: ServiceError) -> FollowResult:
        logging.warning(f"팔로우 요청 거부 ({error.error_code}): {error.message}")
        return FollowResult(success=False, error=error.message, error_code=error.error_code)

    # --- 조회 ---
    def _read_graph(self, collection_ref, user_id: str) -> FollowGraphDoc:
        return FollowGraphDoc.from_snapshot(collection_ref.document(user_id).get())

    def get_follow_status(self, current_user_id: str, target_user_id: str) -> FollowStatus:
        """current_user_id 기준으로 target_user_id와의 팔로우 관계를 확인합니다."""
        following = self._read_graph(self.following_ref, current_user_id)
        followers = self._read_graph(self.followers_ref, current_user_id)
        is_following = target_user_id in following.users
        is_follower = target_user_id in followers.users
        return FollowStatus(
            is_following=is_following,
            is_follower=is_follower,
            is_mutual=is_following and is_follower
        )

    def get_stats(self, user_id: str) -> FollowStats:
        """비정규화된 count 필드로 팔로워/팔로잉 수를 반환합니다."""
        followers_doc = self.followers_ref.document(user_id).get()
        following_doc = self.following_ref.document(user_id).get()
        follower_count = (followers_doc.to_dict() or {}).get('count', 0) if followers_doc.exists else 0
        following_count = (following_doc.to_dict() or {}).get('count', 0) if following_doc.exists else 0
        return FollowStats(follower_count=follower_count, following_count=following_count)

    def get_following_ids(self, user_id: str) -> List[str]:
        return self._read_graph(self.following_ref, user_id).users

    def get_follower_ids(self, user_id: str) -> List[str]:
        return self._read_graph(self.followers_ref, user_id).users

    def list_followers(self, user_id: str, limit: int = 50) -> List[UserProfile]:
        """팔로워 목록을 프로필 요약으로 반환합니다. 순서는 저장된 배열 순서입니다."""
        return self.user_service.get_profiles(self.get_follower_ids(user_id)[:limit])

    def list_following(self, user_id: str, limit: int = 50) -> List[UserProfile]:
        """팔로우 중인 사용자 목록을 프로필 요약으로 반환합니다."""
        return self.user_service.get_profiles(self.get_following_ids(user_id)[:limit])

