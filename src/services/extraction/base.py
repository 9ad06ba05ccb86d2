"""Extraction Protocol

교체 가능한 이미지 → 텍스트 추출 구현을 위한 인터페이스 정의.
"""

from typing import Protocol


class ExtractionError(Exception):
    pass


class Extractor(Protocol):
    """마커 주석 전사 추출 인터페이스

    구현체:
    - GeminiExtraction: Google Gemini API
    """

    async def extract(self, image_data: str, media_type: str) -> str:
        """이미지에서 마커가 붙은 전사 텍스트 추출

        Args:
            image_data: base64 인코딩된 이미지 바이트
            media_type: 이미지 MIME 타입 (예: "image/png")

        Returns:
            str: 줄마다 선택적 마커 문자가 붙은 평문 텍스트

        Raises:
            ExtractionError: 추출 실패 시
        """
        ...
