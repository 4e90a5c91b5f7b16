# app/api/likes/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE


class LikeToggleSchema(Schema):
    """
    POST /api/works/{work_id}/like
    current_like_count는 클라이언트가 화면에 표시 중인 값으로, 서버 계산에는 사용되지 않습니다.
    """
    class Meta:
        unknown = EXCLUDE

    current_like_count = fields.Int(load_default=None, validate=validate.Range(min=0))


class LikeResultSchema(Schema):
    is_liked = fields.Bool(required=True)
    new_like_count = fields.Int(required=True)
