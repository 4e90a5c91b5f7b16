# app/api/auth/services.py
import logging
from typing import Dict, Any

from firebase_admin import auth as firebase_auth

from app.core.errors import UnauthorizedError


class AuthService:
    """
    Firebase Auth에서 발급한 ID 토큰을 검증하는 서비스 클래스.
    검증된 uid는 이 서버가 발급하는 JWT의 identity로 사용됩니다.
    """

    def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        """
        ID 토큰을 검증하고 디코딩된 클레임을 반환합니다.

        :raises UnauthorizedError: 토큰이 유효하지 않거나 만료된 경우
        """
        try:
            claims = firebase_auth.verify_id_token(id_token)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
                firebase_auth.RevokedIdTokenError, firebase_auth.CertificateFetchError) as e:
            logging.warning(f"Firebase ID 토큰 검증 실패: {e}")
            raise UnauthorizedError("유효하지 않은 인증 토큰입니다.", error_code="INVALID_ID_TOKEN")

        if not claims.get('uid'):
            raise UnauthorizedError("토큰에 사용자 정보가 없습니다.", error_code="INVALID_ID_TOKEN")
        return claims
