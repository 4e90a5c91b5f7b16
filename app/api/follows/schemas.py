# app/api/follows/schemas.py
from marshmallow import Schema, fields


class FollowStatusSchema(Schema):
    """GET /api/users/{uid}/follow-status 응답"""
    is_following = fields.Bool(required=True)
    is_follower = fields.Bool(required=True)
    is_mutual = fields.Bool(required=True)


class FollowStatsSchema(Schema):
    """GET /api/users/{uid}/follow-stats 응답"""
    follower_count = fields.Int(required=True)
    following_count = fields.Int(required=True)
