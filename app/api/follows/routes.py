# app/api/follows/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.follows.schemas import FollowStatusSchema, FollowStatsSchema
from app.api.users.schemas import UserSummarySchema, ListQuerySchema
from app.core.errors import http_status_for

follows_bp = Blueprint('follows_bp', __name__)


@follows_bp.route('/<string:uid>/follow', methods=['POST'])
@jwt_required()
def follow_user(uid: str):
    """현재 사용자가 uid 사용자를 팔로우합니다. 이미 팔로우 중이어도 성공으로 응답합니다."""
    follow_service = current_app.services['follows']
    result = follow_service.follow(get_jwt_identity(), uid)
    if not result.success:
        return jsonify({"error_code": result.error_code, "message": result.error}), http_status_for(result.error_code)
    return jsonify({"success": True}), 200


@follows_bp.route('/<string:uid>/follow', methods=['DELETE'])
@jwt_required()
def unfollow_user(uid: str):
    follow_service = current_app.services['follows']
    result = follow_service.unfollow(get_jwt_identity(), uid)
    if not result.success:
        return jsonify({"error_code": result.error_code, "message": result.error}), http_status_for(result.error_code)
    return jsonify({"success": True}), 200


@follows_bp.route('/<string:uid>/follow-status', methods=['GET'])
@jwt_required()
def get_follow_status(uid: str):
    """현재 사용자 기준으로 uid 사용자와의 팔로우 관계를 반환합니다."""
    follow_service = current_app.services['follows']
    status = follow_service.get_follow_status(get_jwt_identity(), uid)
    return jsonify(FollowStatusSchema().dump(status)), 200


@follows_bp.route('/<string:uid>/follow-stats', methods=['GET'])
@jwt_required(optional=True)
def get_follow_stats(uid: str):
    follow_service = current_app.services['follows']
    try:
        stats = follow_service.get_stats(uid)
        return jsonify(FollowStatsSchema().dump(stats)), 200
    except Exception as e:
        logging.error(f"팔로우 통계 조회 중 오류 발생 (uid: {uid}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "팔로우 통계 조회 중 오류가 발생했습니다."}), 500


@follows_bp.route('/<string:uid>/followers', methods=['GET'])
@jwt_required(optional=True)
def get_followers(uid: str):
    follow_service = current_app.services['follows']
    limit = ListQuerySchema().load(request.args)['limit'] or 50
    profiles = follow_service.list_followers(uid, limit=limit)
    return jsonify({"users": UserSummarySchema(many=True).dump(profiles)}), 200


@follows_bp.route('/<string:uid>/following', methods=['GET'])
@jwt_required(optional=True)
def get_following(uid: str):
    follow_service = current_app.services['follows']
    limit = ListQuerySchema().load(request.args)['limit'] or 50
    profiles = follow_service.list_following(uid, limit=limit)
    return jsonify({"users": UserSummarySchema(many=True).dump(profiles)}), 200
