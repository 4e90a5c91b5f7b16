# app/api/comments/schemas.py
from marshmallow import Schema, fields


class CommentCreateSchema(Schema):
    """
    POST /api/works/{work_id}/comments
    공백 제거 후의 길이 검사는 서비스에서 수행합니다.
    """
    content = fields.Str(required=True)


class CommentResponseSchema(Schema):
    """
    댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다.
    """
    comment_id = fields.Str(required=True)
    work_id = fields.Str(required=True)
    uid = fields.Str(required=True)
    username = fields.Str(required=True)
    display_name = fields.Str(required=True)
    user_photo_url = fields.Str(allow_none=True)
    content = fields.Str(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(allow_none=True)
