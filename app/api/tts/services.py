# app/api/tts/services.py
import base64
import json
import logging
from enum import Enum
from typing import Optional, Dict, Any, Iterator

from app.core.errors import ExternalServiceError
from app.services.speech_synthesis_service import SpeechSynthesisService
from app.utils.text_splitter import TextChunk, split_text_for_realtime_tts, analyze_split_result
from app.api.tts.schemas import SynthesisFrameSchema

# 재생 시간 추정치: 1글자당 0.1초
SECONDS_PER_CHARACTER = 0.1


class StreamState(Enum):
    INIT = "init"
    SYNTHESIZING = "synthesizing"
    CHUNK_OK = "chunk_ok"
    CHUNK_ERROR = "chunk_error"
    COMPLETE = "complete"


def estimate_duration(character_count: int) -> int:
    return round(character_count * SECONDS_PER_CHARACTER)


class RealtimeSynthesisStream:
    """
    텍스트를 청크로 나누어 순서대로 합성하고, 결과를 프레임 단위로 내보내는 스트림.

    프레임 순서: init 1개 → 청크마다 성공 또는 오류 프레임 1개 → complete 1개.
    청크 하나의 합성이 실패해도 스트림은 멈추지 않고 다음 청크로 진행합니다.
    클라이언트가 연결을 끊으면 제너레이터가 닫히고 이후 청크는 요청하지 않습니다.
    """
    frame_schema = SynthesisFrameSchema()

    def __init__(self, speech_service: SpeechSynthesisService, text: str, params: Optional[Dict[str, Any]] = None):
        self.speech_service = speech_service
        self.params = params or {}
        self.chunks = split_text_for_realtime_tts(text)
        self.stats = analyze_split_result(self.chunks)
        self.state = StreamState.INIT

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    def frames(self) -> Iterator[Dict[str, Any]]:
        """프레임 딕셔너리를 순서대로 생성합니다."""
        logging.info(f"실시간 음성 합성 시작: {self.stats.total_chunks}개 청크, {self.stats.total_length}자")
        session = self.speech_service.open_session()
        try:
            yield self._init_frame()

            for chunk in self.chunks:
                self.state = StreamState.SYNTHESIZING
                try:
                    audio = self.speech_service.synthesize(chunk.text, self.params, session=session)
                except ExternalServiceError as e:
                    logging.error(f"청크 {chunk.index} 합성 실패 ({e.error_code}): {e.message}")
                    self.state = StreamState.CHUNK_ERROR
                    yield self._error_frame(chunk, e)
                    continue
                except Exception as e:
                    logging.error(f"청크 {chunk.index} 합성 중 예상치 못한 오류: {e}", exc_info=True)
                    self.state = StreamState.CHUNK_ERROR
                    yield self._error_frame(chunk, ExternalServiceError("음성 합성 중 오류가 발생했습니다.", error_code="SYNTHESIS_FAILED"))
                    continue
                self.state = StreamState.CHUNK_OK
                yield self._chunk_frame(chunk, audio)

            self.state = StreamState.COMPLETE
            yield self._complete_frame()
        except GeneratorExit:
            logging.info(f"클라이언트 연결 종료로 음성 합성을 중단합니다. (마지막 상태: {self.state.value})")
            raise
        except Exception as e:
            logging.error(f"실시간 음성 합성 스트림 오류: {e}", exc_info=True)
            yield {'error': "스트리밍 중 오류가 발생했습니다.", 'errorCode': "STREAM_ERROR", 'isComplete': False}
            self.state = StreamState.COMPLETE
            yield self._complete_frame()
        finally:
            session.close()

    def events(self) -> Iterator[str]:
        """응답 본문으로 쓰이는 `data: <json>\\n\\n` 형식의 문자열을 생성합니다."""
        for frame in self.frames():
            yield f"data: {json.dumps(frame, ensure_ascii=False)}\n\n"

    # --- 프레임 생성 ---
    def _init_frame(self) -> Dict[str, Any]:
        return self.frame_schema.dump({
            'chunk_id': 'init',
            'chunk_index': -1,
            'total_chunks': self.total_chunks,
            'character_count': self.stats.total_length,
            'estimated_duration': estimate_duration(self.stats.total_length),
            'is_complete': False,
        })

    def _chunk_frame(self, chunk: TextChunk, audio: bytes) -> Dict[str, Any]:
        return self.frame_schema.dump({
            'chunk_id': chunk.id,
            'chunk_index': chunk.index,
            'total_chunks': self.total_chunks,
            'text': chunk.text,
            'audio_data': base64.b64encode(audio).decode('ascii'),
            'character_count': chunk.original_length,
            'estimated_duration': estimate_duration(chunk.original_length),
            'is_complete': chunk.index == self.total_chunks - 1,
        })

    def _error_frame(self, chunk: TextChunk, error: ExternalServiceError) -> Dict[str, Any]:
        return self.frame_schema.dump({
            'chunk_id': chunk.id,
            'chunk_index': chunk.index,
            'total_chunks': self.total_chunks,
            'text': chunk.text,
            'error': error.message,
            'error_code': error.error_code,
            'is_complete': False,
        })

    def _complete_frame(self) -> Dict[str, Any]:
        return self.frame_schema.dump({
            'chunk_id': 'complete',
            'chunk_index': self.total_chunks,
            'total_chunks': self.total_chunks,
            'is_complete': True,
        })
