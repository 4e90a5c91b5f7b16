# app/api/comments/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.comments.schemas import CommentCreateSchema, CommentResponseSchema
from app.api.users.schemas import ListQuerySchema
from app.core.errors import http_status_for
from app.models.comment import CommentAuthor


comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/works/<string:work_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(work_id: str):
    """
    특정 작품에 새로운 댓글을 작성합니다.
    - 성공 시, 생성된 댓글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    comment_service = current_app.services['comments']
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    data = CommentCreateSchema().load(request.get_json(silent=True) or {})

    profile = user_service.get_profile(user_id)
    if profile is None:
        return jsonify({"error_code": "NOT_FOUND", "message": "댓글 작성자를 찾을 수 없습니다."}), 404

    author = CommentAuthor(
        uid=user_id,
        username=profile.username,
        display_name=profile.display_name,
        photo_url=profile.photo_url
    )
    result = comment_service.create_comment(work_id, data['content'], author)
    if not result.success:
        return jsonify({"error_code": result.error_code, "message": result.error}), http_status_for(result.error_code)
    return jsonify(CommentResponseSchema().dump(comment_service.get_comment(result.comment_id))), 201


@comments_bp.route('/works/<string:work_id>/comments', methods=['GET'])
@jwt_required(optional=True)
def get_comments(work_id: str):
    """특정 작품의 댓글 목록을 최신순으로 조회합니다."""
    comment_service = current_app.services['comments']
    limit = ListQuerySchema().load(request.args)['limit'] or 20
    try:
        comments = comment_service.list_comments(work_id, limit=limit)
        return jsonify({"comments": CommentResponseSchema(many=True).dump(comments)}), 200
    except Exception as e:
        logging.error(f"댓글 목록 조회 중 오류 발생 (work_id: {work_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "댓글 목록 조회 중 오류가 발생했습니다."}), 500


@comments_bp.route('/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    """
    특정 댓글을 삭제합니다. (작성자 본인만 가능)
    - 성공 시, 작품의 댓글 수가 1 감소합니다.
    """
    comment_service = current_app.services['comments']
    result = comment_service.delete_comment(comment_id, get_jwt_identity())
    if not result.success:
        return jsonify({"error_code": result.error_code, "message": result.error}), http_status_for(result.error_code)
    return Response(status=204)
