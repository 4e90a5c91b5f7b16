# app/services/test_speech_synthesis_service.py
"""
음성 합성 API 클라이언트 테스트 (requests는 unittest.mock으로 대체)

사용법: python -m pytest app/services/test_speech_synthesis_service.py -v
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from app.core.errors import ExternalServiceError, SynthesisTimeoutError
from app.services.speech_synthesis_service import SpeechSynthesisService, DEFAULT_MODEL_UUID


def make_response(status_code=200, content=b'ID3audio', text=''):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = content
    response.text = text
    return response


@pytest.fixture
def speech_service():
    service = SpeechSynthesisService()
    service.configure(api_key='secret', api_url='https://tts.example.com/synthesize', timeout=30)
    return service


def test_build_payload_fills_defaults(speech_service):
    payload = speech_service.build_payload('こんにちは')

    assert payload == {
        'model_uuid': DEFAULT_MODEL_UUID,
        'text': 'こんにちは',
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


def test_build_payload_keeps_explicit_values(speech_service):
    payload = speech_service.build_payload('text', {
        'model_uuid': 'custom-model',
        'speaker_uuid': 'speaker-1',
        'style_id': 0,
        'speaking_rate': 1.5,
        'use_ssml': False,
        'output_format': 'wav',
        'pitch': None,
    })

    assert payload['model_uuid'] == 'custom-model'
    assert payload['speaker_uuid'] == 'speaker-1'
    assert payload['style_id'] == 0
    assert payload['speaking_rate'] == 1.5
    assert payload['use_ssml'] is False
    assert payload['output_format'] == 'wav'
    assert payload['pitch'] == 0.0
    assert 'style_name' not in payload


def test_synthesize_posts_with_auth_and_timeout(speech_service):
    with patch.object(requests.Session, 'post', return_value=make_response(content=b'audio')) as post:
        audio = speech_service.synthesize('テスト')

    assert audio == b'audio'
    args, kwargs = post.call_args
    assert args[0] == 'https://tts.example.com/synthesize'
    assert kwargs['timeout'] == 30
    assert kwargs['json']['text'] == 'テスト'


def test_session_carries_bearer_token(speech_service):
    session = speech_service.open_session()
    try:
        assert session.headers['Authorization'] == 'Bearer secret'
        assert session.headers['Content-Type'] == 'application/json'
    finally:
        session.close()


@pytest.mark.parametrize("status_code, error_code", [
    (401, 'INVALID_CREDENTIALS'),
    (402, 'INSUFFICIENT_CREDITS'),
    (404, 'MODEL_NOT_FOUND'),
    (429, 'RATE_LIMITED'),
    (500, 'HTTP_ERROR'),
])
def test_http_errors_are_classified(speech_service, status_code, error_code):
    response = make_response(status_code=status_code, content=b'', text='upstream says no')
    with patch.object(requests.Session, 'post', return_value=response):
        with pytest.raises(ExternalServiceError) as exc_info:
            speech_service.synthesize('text')

    assert exc_info.value.error_code == error_code
    assert exc_info.value.status_code == status_code
    if error_code == 'HTTP_ERROR':
        assert '500' in exc_info.value.message


def test_timeout_is_classified(speech_service):
    with patch.object(requests.Session, 'post', side_effect=requests.Timeout("slow")):
        with pytest.raises(SynthesisTimeoutError) as exc_info:
            speech_service.synthesize('text')
    assert exc_info.value.error_code == 'SYNTHESIS_TIMEOUT'


def test_connection_failure_is_classified(speech_service):
    with patch.object(requests.Session, 'post', side_effect=requests.ConnectionError("refused")):
        with pytest.raises(ExternalServiceError) as exc_info:
            speech_service.synthesize('text')
    assert exc_info.value.error_code == 'CONNECTION_FAILED'


def test_empty_audio_is_an_error(speech_service):
    with patch.object(requests.Session, 'post', return_value=make_response(content=b'')):
        with pytest.raises(ExternalServiceError) as exc_info:
            speech_service.synthesize('text')
    assert exc_info.value.error_code == 'NO_AUDIO_PRODUCED'


def test_unconfigured_service_refuses():
    service = SpeechSynthesisService()
    assert not service.is_configured
    with pytest.raises(ExternalServiceError) as exc_info:
        service.synthesize('text')
    assert exc_info.value.error_code == 'NOT_CONFIGURED'
