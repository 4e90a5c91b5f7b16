# app/api/auth/routes.py

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity
)

from app.api.auth.schemas import SessionRequestSchema
from app.core.errors import UnauthorizedError

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/session', methods=['POST'])
def create_session():
    """Firebase ID 토큰을 검증하고 이 서버의 Access/Refresh Token을 발급합니다."""
    auth_service = current_app.services['auth']
    data = SessionRequestSchema().load(request.get_json(silent=True) or {})
    try:
        claims = auth_service.verify_id_token(data['id_token'])
    except UnauthorizedError as e:
        return jsonify({"error_code": e.error_code, "message": e.message}), e.http_status

    identity = claims['uid']
    return jsonify({
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
        "uid": identity
    }), 200


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)  # Refresh Token만 허용
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200
