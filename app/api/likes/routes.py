# app/api/likes/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.likes.schemas import LikeToggleSchema, LikeResultSchema
from app.core.errors import http_status_for

likes_bp = Blueprint('likes_bp', __name__)


@likes_bp.route('/<string:work_id>/like', methods=['POST'])
@jwt_required()
def toggle_like(work_id: str):
    """작품의 좋아요를 누르거나 취소하고, 서버에서 계산한 최신 좋아요 수를 반환합니다."""
    like_service = current_app.services['likes']
    data = LikeToggleSchema().load(request.get_json(silent=True) or {})
    result = like_service.toggle_like(work_id, get_jwt_identity(), data['current_like_count'])
    if not result.success:
        return jsonify({"error_code": result.error_code, "message": result.error}), http_status_for(result.error_code)
    return jsonify(LikeResultSchema().dump(result)), 200


@likes_bp.route('/<string:work_id>/like', methods=['GET'])
@jwt_required()
def get_like_status(work_id: str):
    like_service = current_app.services['likes']
    return jsonify({"is_liked": like_service.is_work_liked(work_id, get_jwt_identity())}), 200
