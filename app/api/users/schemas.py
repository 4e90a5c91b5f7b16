# app/api/users/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE


class UserSummarySchema(Schema):
    """팔로워/팔로잉 목록 등에 쓰이는 사용자 요약 정보"""
    uid = fields.Str(required=True)
    username = fields.Str(required=True)
    display_name = fields.Str(required=True)
    photo_url = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True)


class ListQuerySchema(Schema):
    """목록 조회 API 공통 쿼리 파라미터. limit을 생략하면 각 API의 기본값이 사용됩니다."""
    class Meta:
        unknown = EXCLUDE

    limit = fields.Int(load_default=None, validate=validate.Range(min=1, max=100))
