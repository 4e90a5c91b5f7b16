# app/services/speech_synthesis_service.py
import logging
from typing import Optional, Dict, Any

import requests
from flask import Flask

from app.core.errors import ExternalServiceError, SynthesisTimeoutError

DEFAULT_API_URL = "https://api.aivis-project.com/v1/tts/synthesize"
DEFAULT_MODEL_UUID = "a59cb814-0083-4369-8542-f51a29e72af7"
DEFAULT_TIMEOUT_SECONDS = 30

# 요청에 값이 없을 때 사용하는 합성 파라미터 기본값
DEFAULT_SYNTHESIS_PARAMS = {
    'speaking_rate': 1.0,
    'pitch': 0.0,
    'volume': 1.0,
    'emotional_intensity': 1.0,
    'tempo_dynamics': 1.0,
    'output_format': 'mp3',
    'output_sampling_rate': 44100,
    'use_ssml': True,
    'leading_silence_seconds': 0.1,
    'trailing_silence_seconds': 0.1,
    'line_break_silence_seconds': 0.4,
}

# 값이 있을 때만 그대로 전달하는 화자 선택 파라미터
OPTIONAL_VOICE_PARAMS = ('speaker_uuid', 'style_id', 'style_name')

# 합성 API의 HTTP 상태 코드별 에러 코드와 사용자 메시지
HTTP_ERROR_CODES = {
    401: ("INVALID_CREDENTIALS", "API 키가 유효하지 않습니다."),
    402: ("INSUFFICIENT_CREDITS", "크레딧 잔액이 부족합니다."),
    404: ("MODEL_NOT_FOUND", "지정한 음성 모델을 찾을 수 없습니다."),
    429: ("RATE_LIMITED", "API 사용 한도에 도달했습니다. 잠시 후 다시 시도해주세요."),
}


def classify_http_error(status_code: int, body: str = '') -> ExternalServiceError:
    """합성 API의 실패 응답을 에러 코드가 붙은 예외로 변환합니다."""
    if status_code in HTTP_ERROR_CODES:
        error_code, message = HTTP_ERROR_CODES[status_code]
        return ExternalServiceError(message, error_code=error_code, status_code=status_code)

    message = f"HTTP {status_code}"
    if body:
        message += f": {body}"
    return ExternalServiceError(message, error_code="HTTP_ERROR", status_code=status_code)


class SpeechSynthesisService:
    """
    외부 음성 합성 API(Aivis Cloud) 연동을 담당하는 서비스 클래스.
    텍스트 청크 하나를 오디오 바이트로 변환합니다.
    """

    def __init__(self):
        """
        설정값을 기본값으로 초기화합니다.
        실제 API 키 등은 init_app 메서드를 통해 설정됩니다.
        """
        self.api_key: Optional[str] = None
        self.api_url = DEFAULT_API_URL
        self.default_model_uuid = DEFAULT_MODEL_UUID
        self.timeout = DEFAULT_TIMEOUT_SECONDS

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 API 설정을 읽습니다.
        API 키가 없어도 앱은 시작되며, 합성 요청 시점에 설정 오류로 응답합니다.

        :param app: Flask 애플리케이션 객체
        """
        self.configure(
            api_key=app.config.get('AIVIS_API_KEY'),
            api_url=app.config.get('AIVIS_API_URL') or DEFAULT_API_URL,
            default_model_uuid=app.config.get('AIVIS_DEFAULT_MODEL_UUID') or DEFAULT_MODEL_UUID,
            timeout=app.config.get('TTS_CHUNK_TIMEOUT_SECONDS') or DEFAULT_TIMEOUT_SECONDS
        )
        if self.is_configured:
            logging.info("SpeechSynthesisService: 음성 합성 서비스가 초기화되었습니다.")
        else:
            logging.warning("SpeechSynthesisService: AIVIS_API_KEY가 설정되지 않아 음성 합성을 사용할 수 없습니다.")

    def configure(self, api_key: Optional[str], api_url: str = DEFAULT_API_URL,
                  default_model_uuid: str = DEFAULT_MODEL_UUID, timeout: int = DEFAULT_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.api_url = api_url
        self.default_model_uuid = default_model_uuid
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def open_session(self) -> requests.Session:
        """스트림 하나가 모든 청크 요청에 재사용하는 HTTP 세션을 엽니다. 호출한 쪽에서 닫아야 합니다."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f"Bearer {self.api_key}",
            'Content-Type': 'application/json',
        })
        return session

    def build_payload(self, text: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """청크 텍스트와 요청 파라미터로 합성 API 요청 본문을 만듭니다. 비어 있는 값은 기본값으로 채웁니다."""
        params = params or {}
        payload = {
            'model_uuid': params.get('model_uuid') or self.default_model_uuid,
            'text': text,
        }
        for key in OPTIONAL_VOICE_PARAMS:
            if params.get(key) is not None:
                payload[key] = params[key]
        for key, default in DEFAULT_SYNTHESIS_PARAMS.items():
            value = params.get(key)
            payload[key] = default if value is None else value
        return payload

    def synthesize(self, text: str, params: Optional[Dict[str, Any]] = None,
                   session: Optional[requests.Session] = None) -> bytes:
        """
        텍스트 청크 하나를 합성해 오디오 바이트를 반환합니다.

        :param text: 합성할 청크 텍스트
        :param params: 요청 파라미터 (모델, 화자, 속도 등)
        :param session: 재사용할 HTTP 세션. 없으면 이번 호출만을 위한 세션을 열고 닫습니다.
        :raises SynthesisTimeoutError: 제한 시간 초과
        :raises ExternalServiceError: 연결 실패, 실패 응답, 빈 오디오
        """
        if not self.is_configured:
            raise ExternalServiceError("음성 합성 서비스가 설정되지 않았습니다.", error_code="NOT_CONFIGURED")

        owns_session = session is None
        session = session or self.open_session()
        try:
            response = session.post(self.api_url, json=self.build_payload(text, params), timeout=self.timeout)
        except requests.Timeout:
            raise SynthesisTimeoutError("음성 생성이 시간 초과되었습니다.")
        except requests.RequestException as e:
            raise ExternalServiceError(f"음성 합성 서버에 연결할 수 없습니다: {e}", error_code="CONNECTION_FAILED")
        finally:
            if owns_session:
                session.close()

        if not response.ok:
            raise classify_http_error(response.status_code, response.text)

        audio = response.content
        if not audio:
            raise ExternalServiceError("음성 데이터가 생성되지 않았습니다.", error_code="NO_AUDIO_PRODUCED")
        return audio
