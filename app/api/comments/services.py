# app/api/comments/services.py

import logging
import uuid
from dataclasses import asdict
from typing import Optional, List, Dict, Any

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.core.errors import ServiceError, NotFoundError, PermissionDeniedError, InputValidationError
from app.models.comment import Comment, CommentAuthor, CommentResult
from app.services.firestore_service import run_in_transaction, snapshot_to_dict, DEFAULT_TRANSACTION_ATTEMPTS
from app.utils.datetime_utils import DateTimeUtils

MAX_COMMENT_LENGTH = 500


class CommentService:
    """
    작품 댓글을 담당하는 서비스 클래스.
    댓글 문서의 생성/삭제와 작품의 comment_count 변경은 항상 같은 트랜잭션에서 처리됩니다.
    """
    def __init__(self, db=None, max_attempts: int = DEFAULT_TRANSACTION_ATTEMPTS):
        self.db = db or firestore.client()
        self.comments_ref = self.db.collection('comments')
        self.works_ref = self.db.collection('works')
        self.max_attempts = max_attempts

    def create_comment(self, work_id: str, content: str, author: CommentAuthor) -> CommentResult:
        """작품에 댓글을 작성합니다. 내용은 앞뒤 공백을 제거한 뒤 1~500자여야 합니다."""
        content = (content or '').strip()
        if not content:
            return self._failure(InputValidationError("댓글 내용을 입력해주세요."))
        if len(content) > MAX_COMMENT_LENGTH:
            return self._failure(InputValidationError(f"댓글은 {MAX_COMMENT_LENGTH}자 이내로 입력해주세요."))

        comment = Comment(
            comment_id=str(uuid.uuid4()),
            work_id=work_id,
            uid=author.uid,
            username=author.username,
            display_name=author.display_name,
            content=content,
            user_photo_url=author.photo_url,
            created_at=DateTimeUtils.now()
        )

        try:
            run_in_transaction(self.db, self._create_in_transaction, comment, max_attempts=self.max_attempts)
            logging.info(f"댓글 작성 완료 (comment_id: {comment.comment_id}, work_id: {work_id})")
            return CommentResult(success=True, comment_id=comment.comment_id)
        except ServiceError as e:
            return self._failure(e)
        except Exception as e:
            logging.error(f"댓글 작성 실패 (work_id: {work_id}): {e}", exc_info=True)
            return CommentResult(success=False, error="댓글 작성에 실패했습니다.", error_code="COMMENT_CREATE_FAILED")

    def _create_in_transaction(self, transaction, comment: Comment) -> None:
        work_ref = self.works_ref.document(comment.work_id)
        work_snapshot = work_ref.get(transaction=transaction)
        if not work_snapshot.exists:
            raise NotFoundError("댓글을 작성할 작품이 존재하지 않습니다.")

        comment_count = max(0, int((work_snapshot.to_dict() or {}).get('comment_count') or 0))
        transaction.set(self.comments_ref.document(comment.comment_id), asdict(comment))
        transaction.update(work_ref, {'comment_count': comment_count + 1})

    def delete_comment(self, comment_id: str, requester_id: str) -> CommentResult:
        """댓글을 삭제합니다. 작성자 본인만 삭제할 수 있습니다."""
        try:
            run_in_transaction(self.db, self._delete_in_transaction, comment_id, requester_id,
                               max_attempts=self.max_attempts)
            logging.info(f"댓글 삭제 완료 (comment_id: {comment_id})")
            return CommentResult(success=True, comment_id=comment_id)
        except ServiceError as e:
            return self._failure(e)
        except Exception as e:
            logging.error(f"댓글 삭제 실패 (comment_id: {comment_id}): {e}", exc_info=True)
            return CommentResult(success=False, error="댓글 삭제에 실패했습니다.", error_code="COMMENT_DELETE_FAILED")

    def _delete_in_transaction(self, transaction, comment_id: str, requester_id: str) -> None:
        comment_ref = self.comments_ref.document(comment_id)
        comment_snapshot = comment_ref.get(transaction=transaction)
        if not comment_snapshot.exists:
            raise NotFoundError("삭제할 댓글이 없습니다.")

        comment_data = comment_snapshot.to_dict() or {}
        if comment_data.get('uid') != requester_id:
            raise PermissionDeniedError("댓글을 삭제할 권한이 없습니다.")

        work_ref = self.works_ref.document(comment_data.get('work_id'))
        work_snapshot = work_ref.get(transaction=transaction)

        transaction.delete(comment_ref)
        if work_snapshot.exists:
            comment_count = max(0, int((work_snapshot.to_dict() or {}).get('comment_count') or 0))
            transaction.update(work_ref, {'comment_count': max(0, comment_count - 1)})
        else:
            # 작품이 먼저 삭제된 경우 댓글만 정리합니다.
            logging.warning(f"댓글 {comment_id}의 작품이 존재하지 않아 comment_count를 갱신하지 않습니다.")

    @staticmethod
    def _failure(error: ServiceError) -> CommentResult:
        logging.warning(f"댓글 요청 거부 ({error.error_code}): {error.message}")
        return CommentResult(success=False, error=error.message, error_code=error.error_code)

    # --- 조회 ---
    def list_comments(self, work_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """작품의 댓글 목록을 최신순으로 조회합니다."""
        query = (
            self.comments_ref
            .where(filter=FieldFilter('work_id', '==', work_id))
            .order_by('created_at', direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [snapshot_to_dict(doc, id_field='comment_id') for doc in query.stream()]

    def list_user_comments(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """사용자가 작성한 댓글 목록을 최신순으로 조회합니다."""
        query = (
            self.comments_ref
            .where(filter=FieldFilter('uid', '==', user_id))
            .order_by('created_at', direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [snapshot_to_dict(doc, id_field='comment_id') for doc in query.stream()]

    def get_comment(self, comment_id: str) -> Optional[Dict[str, Any]]:
        return snapshot_to_dict(self.comments_ref.document(comment_id).get(), id_field='comment_id')
