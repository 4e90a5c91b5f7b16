# app/utils/text_splitter.py
"""
실시간 음성 합성에 적합한 단위로 텍스트를 분할하는 유틸리티

합성 API는 긴 입력에서 품질이 떨어지므로 한 청크를 최대 200자로 제한하고,
가능하면 문장 끝(。．！？ 및 전각 공백) 바로 뒤에서 자릅니다.
"""

from dataclasses import dataclass
from typing import List

MAX_CHUNK_LENGTH = 200
SEARCH_WINDOW = 50
SENTENCE_ENDERS = ('。', '．', '！', '？', '　')


@dataclass
class TextChunk:
    """합성 파이프라인 내부에서만 쓰이는 텍스트 조각. 저장되지 않습니다."""
    id: str
    text: str
    index: int
    original_length: int


@dataclass
class SplitStatistics:
    """분할 결과 통계"""
    total_chunks: int
    total_length: int
    average_length: int
    max_length: int
    min_length: int


def split_text_for_realtime_tts(text: str) -> List[TextChunk]:
    """
    텍스트를 줄 단위로 나누고, 200자를 넘는 줄은 문장 경계에서 다시 나눕니다.
    청크 index는 줄 단위가 아니라 입력 전체에 걸쳐 0부터 순서대로 부여됩니다.

    :param text: 합성할 원본 텍스트
    :return: 순서대로 정렬된 TextChunk 리스트 (빈 입력이면 빈 리스트)
    """
    if not text or not text.strip():
        return []

    chunks: List[TextChunk] = []
    for line in text.splitlines():
        trimmed_line = line.strip()
        if not trimmed_line:
            continue

        if len(trimmed_line) <= MAX_CHUNK_LENGTH:
            pieces = [trimmed_line]
        else:
            pieces = _split_long_text(trimmed_line)

        for piece in pieces:
            index = len(chunks)
            chunks.append(TextChunk(
                id=f"chunk_{index}",
                text=piece,
                index=index,
                original_length=len(piece)
            ))
    return chunks


def _split_long_text(text: str) -> List[str]:
    """
    200자를 넘는 한 줄을 나눕니다.
    200자 경계 앞뒤 50자([150, 250)) 범위를 뒤에서부터 탐색해 문장 끝 기호 바로 뒤에서 자르되,
    청크가 200자를 넘지 않도록 분할 지점은 200 이하로 제한합니다.
    해당 범위에 문장 끝 기호가 없으면 정확히 200자에서 강제로 자릅니다.
    """
    pieces: List[str] = []
    current = text

    while len(current) > MAX_CHUNK_LENGTH:
        search_start = max(0, MAX_CHUNK_LENGTH - SEARCH_WINDOW)
        search_end = min(len(current), MAX_CHUNK_LENGTH + SEARCH_WINDOW)
        # 분할 지점이 200을 넘으면 청크가 상한을 초과하므로 탐색 끝을 잘라냅니다.
        search_end = min(search_end, MAX_CHUNK_LENGTH)

        split_point = -1
        for i in range(search_end - 1, search_start - 1, -1):
            if current[i] in SENTENCE_ENDERS:
                split_point = i + 1
                break

        if split_point == -1:
            split_point = MAX_CHUNK_LENGTH

        pieces.append(current[:split_point])
        current = current[split_point:]

    if current.strip():
        pieces.append(current)
    return pieces


def analyze_split_result(chunks: List[TextChunk]) -> SplitStatistics:
    """분할 결과의 통계 정보를 계산합니다. (스트림 초기 프레임의 글자 수/예상 시간 산출에 사용)"""
    if not chunks:
        return SplitStatistics(total_chunks=0, total_length=0, average_length=0, max_length=0, min_length=0)

    lengths = [chunk.original_length for chunk in chunks]
    total_length = sum(lengths)
    return SplitStatistics(
        total_chunks=len(chunks),
        total_length=total_length,
        average_length=round(total_length / len(chunks)),
        max_length=max(lengths),
        min_length=min(lengths)
    )
