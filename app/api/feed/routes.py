# app/api/feed/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.feed.schemas import FeedQuerySchema, FeedResponseSchema

feed_bp = Blueprint('feed_bp', __name__)


@feed_bp.route('/following', methods=['GET'])
@jwt_required()
def get_following_feed():
    """
    팔로우 중인 사용자들의 최신 작품 피드를 반환합니다.
    - has_feeds=false: 팔로우한 사용자가 없음
    - has_feeds=true, works=[]: 팔로우는 있지만 표시할 작품이 없음
    """
    feed_service = current_app.services['feed']
    query = FeedQuerySchema().load(request.args)
    result = feed_service.assemble_feed(
        get_jwt_identity(),
        per_author_limit=query['per_author_limit'] or current_app.config['FEED_PER_AUTHOR_LIMIT'],
        total_limit=query['limit'] or current_app.config['FEED_TOTAL_LIMIT'],
        age_filter=query['age_filter']
    )
    return jsonify(FeedResponseSchema().dump(result)), 200
