# app/api/tts/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE


class RealtimeTTSRequestSchema(Schema):
    """
    POST /api/tts/realtime-synthesize
    실시간 음성 합성 요청 본문. 생략한 파라미터는 합성 서비스의 기본값이 사용됩니다.
    """
    class Meta:
        unknown = EXCLUDE

    text = fields.Str(required=True)
    model_uuid = fields.Str(load_default=None)
    speaker_uuid = fields.Str(load_default=None)
    style_id = fields.Int(load_default=None)
    style_name = fields.Str(load_default=None)
    speaking_rate = fields.Float(load_default=None)
    pitch = fields.Float(load_default=None)
    volume = fields.Float(load_default=None)
    emotional_intensity = fields.Float(load_default=None)
    tempo_dynamics = fields.Float(load_default=None)
    output_format = fields.Str(load_default=None, validate=validate.OneOf(['mp3', 'wav', 'aac', 'opus']))
    output_sampling_rate = fields.Int(load_default=None)
    use_ssml = fields.Bool(load_default=None)
    leading_silence_seconds = fields.Float(load_default=None)
    trailing_silence_seconds = fields.Float(load_default=None)
    line_break_silence_seconds = fields.Float(load_default=None)


class SynthesisFrameSchema(Schema):
    """
    스트림으로 전송되는 프레임 하나의 JSON 형식.
    클라이언트 재생기와의 호환을 위해 키는 camelCase를 사용합니다.
    """
    chunk_id = fields.Str(data_key='chunkId')
    chunk_index = fields.Int(data_key='chunkIndex')
    total_chunks = fields.Int(data_key='totalChunks')
    text = fields.Str()
    audio_data = fields.Str(data_key='audioData')
    character_count = fields.Int(data_key='characterCount')
    estimated_duration = fields.Int(data_key='estimatedDuration')
    error = fields.Str()
    error_code = fields.Str(data_key='errorCode')
    is_complete = fields.Bool(data_key='isComplete')
