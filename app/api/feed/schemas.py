# app/api/feed/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from app.models.work import AgeFilter


class FeedQuerySchema(Schema):
    """
    GET /api/feed/following 쿼리 파라미터.
    생략하면 앱 설정(FEED_PER_AUTHOR_LIMIT, FEED_TOTAL_LIMIT)의 값이 사용됩니다.
    """
    class Meta:
        unknown = EXCLUDE

    per_author_limit = fields.Int(load_default=None, validate=validate.Range(min=1, max=50))
    limit = fields.Int(load_default=None, validate=validate.Range(min=1, max=100))
    age_filter = fields.Enum(AgeFilter, by_value=True, load_default=AgeFilter.ALL)


class WorkSchema(Schema):
    """피드와 좋아요 목록에 쓰이는 작품 정보"""
    work_id = fields.Str(required=True)
    uid = fields.Str(required=True)
    title = fields.Str()
    username = fields.Str()
    display_name = fields.Str()
    like_count = fields.Int()
    comment_count = fields.Int()
    content_rating = fields.Str()
    audio_url = fields.Str(allow_none=True)
    image_url = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime(allow_none=True)


class FeedResponseSchema(Schema):
    works = fields.List(fields.Nested(WorkSchema))
    has_feeds = fields.Bool(required=True)
