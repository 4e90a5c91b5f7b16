# app/core/errors.py
"""
서비스 계층에서 사용하는 도메인 예외 정의.

트랜잭션 내부에서 발생시키고, 각 서비스의 공개 메서드에서 잡아
`{success: False, error, error_code}` 형태의 결과로 변환합니다.
라우트는 error_code와 http_status를 그대로 응답에 사용합니다.
"""
from typing import Optional


class ServiceError(Exception):
    """모든 도메인 예외의 기반 클래스."""
    error_code = "SERVICE_ERROR"
    http_status = 500

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class InputValidationError(ServiceError):
    """잘못된 입력값 (빈 댓글, 길이 초과 등). 수정 후 재요청하면 복구 가능합니다."""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class NotFoundError(ServiceError):
    """참조한 작품/댓글/사용자가 존재하지 않습니다."""
    error_code = "NOT_FOUND"
    http_status = 404


class PermissionDeniedError(ServiceError):
    """소유권 확인 실패. 재시도하지 않습니다."""
    error_code = "FORBIDDEN"
    http_status = 403


class InvalidOperationError(ServiceError):
    """허용되지 않는 조작 (자기 자신 팔로우 등)."""
    error_code = "INVALID_OPERATION"
    http_status = 400


class ExternalServiceError(ServiceError):
    """외부 음성 합성 API 호출 실패. HTTP 응답이 아니라 청크 오류 프레임으로 전달되며 스트림을 중단하지 않습니다."""
    error_code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, error_code)
        self.status_code = status_code


class SynthesisTimeoutError(ExternalServiceError):
    """청크 하나의 합성이 제한 시간을 넘었습니다."""
    error_code = "SYNTHESIS_TIMEOUT"


class UnauthorizedError(ServiceError):
    """Firebase ID 토큰 검증 실패."""
    error_code = "UNAUTHORIZED"
    http_status = 401


ERROR_STATUS_BY_CODE = {
    error.error_code: error.http_status
    for error in (InputValidationError, InvalidOperationError, UnauthorizedError, PermissionDeniedError, NotFoundError)
}


def http_status_for(error_code: Optional[str]) -> int:
    """서비스 결과의 error_code를 HTTP 상태 코드로 변환합니다. 알 수 없는 코드는 500."""
    return ERROR_STATUS_BY_CODE.get(error_code, 500)
