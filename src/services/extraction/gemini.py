"""Gemini 기반 전사 추출 구현체"""

# pyright: reportMissingTypeStubs=false

import base64
import binascii
import logging
import re

from google import genai
from google.genai import types

from src.services.extraction.base import ExtractionError

logger = logging.getLogger(__name__)

EXTRACT_PROMPT = """This image is a page (or a long vertical strip) from a manhwa/comic.
Extract ALL text in reading order, top to bottom, one text element per line.

Start every line with exactly one marker character describing where the text appears:
# text inside a normal speech bubble
$ text inside a thought or whisper bubble
& text inside a narration box
( sound effects (SFX)
) text inside a scream bubble
/ text inside a system or status-window bubble
_ any other text that fits none of the above

Rules:
- Keep the original language; do not translate.
- Put the marker directly before the text, e.g. "#Hello there".
- Merge the lines of a single bubble into one line.
- Output only the marked lines. No explanations, no Markdown."""

_CODE_FENCE = re.compile(r"^```[\w-]*\n(?P<body>.*?)\n?```$", re.DOTALL)


class GeminiExtraction:
    """Google Gemini API를 사용한 마커 주석 전사 추출"""

    def __init__(self, api_key: str, model: str, timeout: int = 120) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout

    async def extract(self, image_data: str, media_type: str) -> str:
        """한 번의 API 호출로 전사 추출 (재시도 없음)

        Raises:
            ExtractionError: API 키 누락, 잘못된 이미지 데이터, API 실패, 빈 응답
        """
        if not self._api_key:
            raise ExtractionError("GEMINI_API_KEY가 설정되지 않았습니다")

        try:
            image_bytes = base64.b64decode(image_data, validate=True)
        except binascii.Error as e:
            raise ExtractionError(f"base64 디코딩 실패: {e}") from e

        client = genai.Client(
            api_key=self._api_key,
            http_options=types.HttpOptions(timeout=self._timeout * 1000),
        )
        part = types.Part.from_bytes(data=image_bytes, mime_type=media_type)

        try:
            response = await client.aio.models.generate_content(
                model=self._model,
                contents=[EXTRACT_PROMPT, part],
                config=types.GenerateContentConfig(temperature=0.1),
            )
        except Exception as e:
            raise ExtractionError(f"Gemini API 호출 실패: {e}") from e

        if not response.text:
            raise ExtractionError("빈 응답")

        text = _strip_code_fence(response.text.strip())
        logger.info(f"전사 추출 완료: {len(text.splitlines())}줄")
        return text


def _strip_code_fence(text: str) -> str:
    """모델이 Markdown 코드 블록으로 감싼 경우 본문만 남긴다"""
    match = _CODE_FENCE.match(text)
    if match is None:
        return text
    return match.group("body")
