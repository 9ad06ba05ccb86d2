"""Extract 서비스: 세션 없이 이미지 한 장을 바로 전사

요청마다 새 Orchestrator를 만들어 한 번 트리거한다.
"""

from src.constants import Messages
from src.schemas.annotation import RenderedLine
from src.schemas.base import BaseSchema
from src.schemas.extraction import Failed, Idle, Succeeded
from src.services.annotation import render_lines
from src.services.encoder import ImageSource
from src.services.extraction import get_extraction
from src.services.orchestrator import ExtractionOrchestrator


class TranscriptResponse(BaseSchema):
    """전사 결과"""

    filename: str | None = None
    media_type: str | None = None
    raw_text: str
    lines: list[RenderedLine]


class ExtractFailedError(Exception):
    """추출 실패. message는 사용자 노출용 고정 문구."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


async def extract_image(file: ImageSource | None) -> TranscriptResponse:
    """
    Raises:
        ExtractFailedError: NO_IMAGE (이미지 미선택) | EXTRACTION_FAILED
    """
    orchestrator = ExtractionOrchestrator(get_extraction())
    if file is not None:
        orchestrator.select_image(file)

    state = await orchestrator.extract()

    if isinstance(state, Idle):
        raise ExtractFailedError("NO_IMAGE", state.message or "")
    if isinstance(state, Failed):
        raise ExtractFailedError("EXTRACTION_FAILED", state.message)
    if not isinstance(state, Succeeded):
        raise ExtractFailedError("EXTRACTION_FAILED", Messages.EXTRACTION_FAILED)

    return TranscriptResponse(
        filename=file.filename if file is not None else None,
        media_type=file.content_type if file is not None else None,
        raw_text=state.raw_text,
        lines=render_lines(orchestrator.lines),
    )
