import asyncio
from collections.abc import Generator
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.main import app
from src.services.extraction import ExtractionError, set_extraction
from src.services.session import SessionStore, set_sessions

SAMPLE_TRANSCRIPT = "#Hi\n$thinking...\n&Long ago...\nplain"


def make_test_image(width: int = 800, height: int = 1200, fmt: str = "JPEG") -> BytesIO:
    """테스트용 실제 이미지 바이트 생성"""
    img = Image.new("RGB", (width, height), color="red")
    buf = BytesIO()
    img.save(buf, format=fmt)
    buf.seek(0)
    return buf


class FakeExtractor:
    """호출 기록을 남기는 extraction 백엔드 mock

    gate를 주면 set()될 때까지 응답을 붙잡는다 (진행 중 요청 재현용).
    """

    def __init__(
        self,
        text: str = SAMPLE_TRANSCRIPT,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.text = text
        self.error = error
        self.gate = gate
        self.calls: list[tuple[str, str]] = []

    async def extract(self, image_data: str, media_type: str) -> str:
        self.calls.append((image_data, media_type))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.text


class FakeImage:
    """ImageSource 테스트 구현"""

    def __init__(
        self,
        data: bytes = b"\x89PNG fake",
        content_type: str | None = "image/png",
        filename: str | None = "page.png",
        error: Exception | None = None,
    ) -> None:
        self.data = data
        self.content_type = content_type
        self.filename = filename
        self.error = error

    async def read(self, size: int = -1) -> bytes:
        if self.error is not None:
            raise self.error
        return self.data


@pytest.fixture
def fake_extractor() -> Generator[FakeExtractor, None, None]:
    extractor = FakeExtractor()
    set_extraction(extractor)
    yield extractor
    set_extraction(None)


@pytest.fixture
def failing_extractor() -> Generator[FakeExtractor, None, None]:
    extractor = FakeExtractor(error=ExtractionError("quota exceeded"))
    set_extraction(extractor)
    yield extractor
    set_extraction(None)


@pytest.fixture
def session_store() -> Generator[SessionStore, None, None]:
    store = SessionStore(max_sessions=10)
    set_sessions(store)
    yield store
    set_sessions(None)


@pytest.fixture
def client(session_store: SessionStore) -> Generator[TestClient, None, None]:
    yield TestClient(app)


@pytest.fixture
def session_id(client: TestClient, fake_extractor: FakeExtractor) -> str:
    response = client.post("/sessions")
    return response.json()["sessionId"]
