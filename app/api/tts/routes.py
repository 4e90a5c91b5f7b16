# app/api/tts/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app, stream_with_context

from app.api.tts.schemas import RealtimeTTSRequestSchema
from app.api.tts.services import RealtimeSynthesisStream

tts_bp = Blueprint('tts_bp', __name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}


@tts_bp.route('/realtime-synthesize', methods=['POST', 'OPTIONS'])
def realtime_synthesize():
    """
    텍스트를 청크 단위로 합성하여 `data: <json>` 프레임 스트림으로 반환합니다.
    - 텍스트가 비어 있으면 400, 합성 API 키가 설정되지 않았으면 500을 반환합니다.
    - 청크별 합성 실패는 스트림 안의 오류 프레임으로 전달됩니다.
    """
    if request.method == 'OPTIONS':
        return Response(status=200, headers=CORS_HEADERS)

    params = RealtimeTTSRequestSchema().load(request.get_json(silent=True) or {})
    text = params.pop('text')
    if not text.strip():
        return jsonify({"error_code": "VALIDATION_ERROR", "message": "텍스트가 입력되지 않았습니다."}), 400

    speech_service = current_app.services['speech']
    if not speech_service.is_configured:
        logging.error("AIVIS_API_KEY가 설정되지 않아 음성 합성 요청을 처리할 수 없습니다.")
        return jsonify({"error_code": "TTS_NOT_CONFIGURED", "message": "음성 합성 서비스 설정 오류입니다."}), 500

    stream = RealtimeSynthesisStream(speech_service, text, params)
    return Response(
        stream_with_context(stream.events()),
        status=200,
        content_type='text/plain; charset=utf-8',
        headers={'Cache-Control': 'no-cache', **CORS_HEADERS}
    )
