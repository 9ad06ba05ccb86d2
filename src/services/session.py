"""Session 서비스: 세션별 Orchestrator 관리

세션 하나 = 선택 이미지 슬롯 하나 + 상태 슬롯 하나.
영속화하지 않는다 (프로세스 메모리 전용).
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from datetime import UTC, datetime

from src.config import get_settings
from src.constants import Messages, SessionId
from src.schemas.annotation import RenderedLine
from src.schemas.base import BaseSchema
from src.schemas.extraction import ExtractionStatus, Failed, Idle, Loading, Succeeded
from src.services.annotation import render_lines
from src.services.encoder import ImageSource, StoredImage
from src.services.extraction import get_extraction
from src.services.orchestrator import ExtractionOrchestrator

logger = logging.getLogger(__name__)


class SessionResponse(BaseSchema):
    """세션 상태 응답"""

    session_id: str
    status: ExtractionStatus
    message: str | None = None
    image_name: str | None = None
    raw_text: str | None = None
    lines: list[RenderedLine] = []
    copied: bool = False
    created_at: str


class CopyResponse(BaseSchema):
    text: str
    copied: bool


class InvalidSessionIdError(Exception):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"잘못된 세션 ID 형식: {session_id}")


class SessionNotFoundError(Exception):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"존재하지 않는 세션 ID: {session_id}")


class NothingToCopyError(Exception):
    pass


@dataclass
class Session:
    session_id: str
    orchestrator: ExtractionOrchestrator
    created_at: str


class SessionStore:
    """메모리 세션 저장소. 최대 개수를 넘으면 가장 오래된 세션부터 제거."""

    def __init__(self, max_sessions: int) -> None:
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, Session] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, orchestrator: ExtractionOrchestrator) -> Session:
        session_id = _generate_session_id()
        while session_id in self._sessions:
            session_id = _generate_session_id()

        session = Session(
            session_id=session_id,
            orchestrator=orchestrator,
            created_at=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        )
        self._sessions[session.session_id] = session

        while len(self._sessions) > self._max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(f"세션 개수 초과로 제거: {evicted_id}")

        return session

    def get(self, session_id: str) -> Session:
        """
        Raises:
            InvalidSessionIdError: ID 형식 불일치
            SessionNotFoundError: 존재하지 않는 세션
        """
        if not SessionId.PATTERN.match(session_id):
            raise InvalidSessionIdError(session_id)

        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]


class _SessionHolder:
    store: SessionStore | None = None


def get_sessions() -> SessionStore:
    if _SessionHolder.store is None:
        _SessionHolder.store = SessionStore(max_sessions=get_settings().max_sessions)
    return _SessionHolder.store


def set_sessions(store: SessionStore | None) -> None:
    _SessionHolder.store = store


def _generate_session_id() -> str:
    return f"{SessionId.PREFIX}{uuid.uuid4().hex[:8]}"


def to_response(session: Session) -> SessionResponse:
    orchestrator = session.orchestrator
    state = orchestrator.state
    image = orchestrator.image

    response = SessionResponse(
        session_id=session.session_id,
        status=state.status,
        image_name=image.filename if image is not None else None,
        copied=orchestrator.copy_indicator.copied,
        created_at=session.created_at,
    )

    if isinstance(state, Succeeded):
        response.raw_text = state.raw_text
        response.lines = render_lines(orchestrator.lines)
        if not response.lines:
            response.message = Messages.NO_RESULTS
    elif isinstance(state, Failed):
        response.message = state.message
    elif isinstance(state, Loading):
        response.message = Messages.LOADING
    elif isinstance(state, Idle):
        response.message = state.message or Messages.NO_RESULTS

    return response


def create_session() -> SessionResponse:
    session = get_sessions().create(ExtractionOrchestrator(get_extraction()))
    logger.info(f"세션 생성: {session.session_id}")
    return to_response(session)


def get_session(session_id: str) -> SessionResponse:
    return to_response(get_sessions().get(session_id))


def delete_session(session_id: str) -> None:
    get_sessions().delete(session_id)
    logger.info(f"세션 삭제: {session_id}")


async def select_image(session_id: str, file: ImageSource) -> SessionResponse:
    """
    Raises:
        EncodingError: 업로드 파일 읽기 실패
    """
    session = get_sessions().get(session_id)
    session.orchestrator.begin_selection()
    image = await StoredImage.from_source(file)
    session.orchestrator.select_image(image)
    return to_response(session)


async def trigger_extract(session_id: str) -> SessionResponse:
    session = get_sessions().get(session_id)
    await session.orchestrator.extract()
    return to_response(session)


def copy_result(session_id: str) -> CopyResponse:
    """
    Raises:
        NothingToCopyError: 성공한 결과가 없음
    """
    session = get_sessions().get(session_id)
    text = session.orchestrator.copy_result()
    if text is None:
        raise NothingToCopyError()
    return CopyResponse(text=text, copied=session.orchestrator.copy_indicator.copied)
