# app/api/likes/services.py
import logging
from typing import Optional, List, Tuple

from firebase_admin import firestore

from app.core.errors import ServiceError, NotFoundError, InputValidationError
from app.models.like import LikeRecord, LikeResult
from app.models.work import Work
from app.services.firestore_service import run_in_transaction, get_documents, DEFAULT_TRANSACTION_ATTEMPTS
from app.utils.datetime_utils import DateTimeUtils


class LikeService:
    """
    작품 좋아요를 담당하는 서비스 클래스.

    - likes/{user_id}.liked_work_ids: 사용자가 좋아요한 작품 ID 목록
    - works/{work_id}.like_count: 비정규화된 좋아요 수
    두 값은 이 서비스의 트랜잭션 안에서만 함께 변경됩니다.
    """
    def __init__(self, db=None, max_attempts: int = DEFAULT_TRANSACTION_ATTEMPTS):
        self.db = db or firestore.client()
        self.likes_ref = self.db.collection('likes')
        self.works_ref = self.db.collection('works')
        self.max_attempts = max_attempts

    def toggle_like(self, work_id: str, user_id: str, current_like_count: Optional[int] = None) -> LikeResult:
        """
        좋아요를 누르거나 취소합니다.

        current_like_count는 클라이언트의 낙관적 UI가 보고 있던 값으로, 로그 비교용으로만 받습니다.
        실제 변경은 항상 트랜잭션 안에서 새로 읽은 like_count를 기준으로 계산합니다.
        """
        if not work_id or not user_id:
            return self._failure(InputValidationError("사용자 ID 또는 작품 ID가 유효하지 않습니다."))

        try:
            is_liked, new_like_count = run_in_transaction(
                self.db, self._toggle_like_in_transaction, work_id, user_id,
                max_attempts=self.max_attempts
            )
        except ServiceError as e:
            return self._failure(e)
        except Exception as e:
            logging.error(f"좋아요 토글 실패 (user_id: {user_id}, work_id: {work_id}): {e}", exc_info=True)
            return LikeResult(success=False, error="좋아요 처리에 실패했습니다.", error_code="LIKE_TOGGLE_FAILED")

        if current_like_count is not None:
            expected = current_like_count - 1 if not is_liked else current_like_count + 1
            if expected != new_like_count:
                logging.debug(f"클라이언트 좋아요 수와 서버 값 불일치 (work_id: {work_id}, client: {current_like_count}, server: {new_like_count})")
        return LikeResult(success=True, is_liked=is_liked, new_like_count=new_like_count)

    def _toggle_like_in_transaction(self, transaction, work_id: str, user_id: str) -> Tuple[bool, int]:
        likes_doc_ref = self.likes_ref.document(user_id)
        work_ref = self.works_ref.document(work_id)

        likes_snapshot = likes_doc_ref.get(transaction=transaction)
        work_snapshot = work_ref.get(transaction=transaction)

        if not work_snapshot.exists:
            raise NotFoundError("작품을 찾을 수 없습니다.")

        record = LikeRecord.from_snapshot(user_id, likes_snapshot)
        current_like_count = max(0, int((work_snapshot.to_dict() or {}).get('like_count') or 0))

        if work_id in record.liked_work_ids:
            # 좋아요 취소
            record.liked_work_ids = [wid for wid in record.liked_work_ids if wid != work_id]
            new_like_count = max(0, current_like_count - 1)
            is_liked = False
        else:
            # 새로운 좋아요
            record.liked_work_ids.append(work_id)
            new_like_count = current_like_count + 1
            is_liked = True

        transaction.set(likes_doc_ref, {
            'uid': user_id,
            'liked_work_ids': record.liked_work_ids,
            'updated_at': DateTimeUtils.now()
        })
        transaction.update(work_ref, {'like_count': new_like_count})
        return is_liked, new_like_count

    @staticmethod
    def _failure(error: ServiceError) -> LikeResult:
        logging.warning(f"좋아요 요청 거부 ({error.error_code}): {error.message}")
        return LikeResult(success=False, error=error.message, error_code=error.error_code)

    # --- 조회 ---
    def get_user_likes(self, user_id: str) -> LikeRecord:
        """사용자의 좋아요 문서를 반환합니다. 아직 없으면 빈 기록을 반환합니다."""
        return LikeRecord.from_snapshot(user_id, self.likes_ref.document(user_id).get())

    def is_work_liked(self, work_id: str, user_id: str) -> bool:
        if not work_id or not user_id:
            return False
        return work_id in self.get_user_likes(user_id).liked_work_ids

    def get_liked_works(self, user_id: str, limit: Optional[int] = None) -> List[Work]:
        """사용자가 좋아요한 작품 목록을 최근에 좋아요한 순서로 반환합니다. 삭제된 작품은 제외됩니다."""
        liked_ids = list(reversed(self.get_user_likes(user_id).liked_work_ids))
        if limit is not None:
            liked_ids = liked_ids[:limit]
        found = get_documents(self.db, 'works', liked_ids)
        return [Work.from_dict(work_id, found[work_id]) for work_id in liked_ids if work_id in found]
