"""이미지 → 마커 전사 추출 백엔드

EXTRACTION_PROVIDER 설정으로 구현체를 고른다 (현재 "gemini"만 지원).
테스트에서는 set_extraction()으로 가짜 추출기를 끼워 넣는다.
"""

from src.config import Settings, get_settings
from src.services.extraction.base import ExtractionError, Extractor
from src.services.extraction.gemini import GeminiExtraction

__all__ = ["Extractor", "ExtractionError", "get_extraction", "set_extraction"]


class _ExtractorHolder:
    extractor: Extractor | None = None


def _build_extractor(settings: Settings) -> Extractor:
    provider = settings.extraction_provider
    if provider == "gemini":
        return GeminiExtraction(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.gemini_timeout,
        )
    raise ValueError(f"Unknown extraction provider: {provider!r}")


def get_extraction() -> Extractor:
    if _ExtractorHolder.extractor is None:
        _ExtractorHolder.extractor = _build_extractor(get_settings())
    return _ExtractorHolder.extractor


def set_extraction(extractor: Extractor | None) -> None:
    _ExtractorHolder.extractor = extractor
