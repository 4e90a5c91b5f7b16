# app/api/users/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required

from app.api.comments.schemas import CommentResponseSchema
from app.api.feed.schemas import WorkSchema
from app.api.users.schemas import UserSummarySchema, ListQuerySchema

users_bp = Blueprint('users_bp', __name__)


@users_bp.route('/<string:uid>', methods=['GET'])
@jwt_required(optional=True)
def get_user_profile(uid: str):
    user_service = current_app.services['users']
    profile = user_service.get_profile(uid)
    if profile is None:
        return jsonify({"error_code": "NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserSummarySchema().dump(profile)), 200


@users_bp.route('/<string:uid>/likes', methods=['GET'])
@jwt_required(optional=True)
def get_liked_works(uid: str):
    """사용자가 좋아요한 작품 목록을 최근에 좋아요한 순서로 반환합니다."""
    like_service = current_app.services['likes']
    limit = ListQuerySchema().load(request.args)['limit']
    works = like_service.get_liked_works(uid, limit=limit)
    return jsonify({"works": WorkSchema(many=True).dump(works)}), 200


@users_bp.route('/<string:uid>/comments', methods=['GET'])
@jwt_required(optional=True)
def get_user_comments(uid: str):
    comment_service = current_app.services['comments']
    limit = ListQuerySchema().load(request.args)['limit'] or 20
    comments = comment_service.list_user_comments(uid, limit=limit)
    return jsonify({"comments": CommentResponseSchema(many=True).dump(comments)}), 200
