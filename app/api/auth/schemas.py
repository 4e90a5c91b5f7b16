# app/api/auth/schemas.py
from marshmallow import Schema, fields, validate


class SessionRequestSchema(Schema):
    """POST /api/auth/session 요청. 클라이언트가 Firebase Auth로 로그인해 받은 ID 토큰을 전달합니다."""
    id_token = fields.Str(required=True, validate=validate.Length(min=1))
