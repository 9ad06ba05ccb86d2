"""Extraction Orchestrator: 선택 → 인코딩 → 추출 → 표시 상태 머신

상태 전이:
- 이미지 없이 트리거: Idle 유지 (검증 메시지), Loading 진입 없음
- 이미지 있는 트리거: Loading → Succeeded(raw_text) | Failed(message)
- 새 이미지 선택: 어떤 상태든 Idle, 진행 중인 요청 결과는 버린다

오래된 응답 차단은 세대(generation) 카운터로 처리한다. 선택/트리거마다
카운터를 올리고, 응답이 도착했을 때 자기 세대가 여전히 현재인지 확인한다.
외부 서비스에 취소 신호는 보내지 않는다.
"""

import asyncio
import logging
from collections.abc import Callable

from src.constants import Messages, Timing
from src.schemas.annotation import ClassifiedLine
from src.schemas.extraction import ExtractionState, Failed, Idle, Loading, Succeeded
from src.services.annotation import parse_transcript
from src.services.encoder import EncodingError, ImageSource, encode
from src.services.extraction.base import ExtractionError, Extractor

logger = logging.getLogger(__name__)

Clipboard = Callable[[str], object]


class CopyIndicator:
    """복사 후 잠깐 켜졌다 꺼지는 "복사됨" 표시

    클립보드 쓰기는 fire-and-forget. 추출 상태에는 영향 없음.
    """

    def __init__(
        self,
        clipboard: Clipboard | None = None,
        reset_after: float = Timing.COPY_RESET_SECONDS,
    ) -> None:
        self._clipboard = clipboard
        self._reset_after = reset_after
        self._reset_handle: asyncio.TimerHandle | None = None
        self.copied = False

    def copy(self, text: str) -> None:
        if self._clipboard is not None:
            try:
                self._clipboard(text)
            except Exception as e:
                logger.warning(f"클립보드 쓰기 실패: {e}")

        self.copied = True
        if self._reset_handle is not None:
            self._reset_handle.cancel()
        self._reset_handle = asyncio.get_running_loop().call_later(self._reset_after, self._reset)

    def _reset(self) -> None:
        self.copied = False
        self._reset_handle = None


class ExtractionOrchestrator:
    def __init__(self, extractor: Extractor, copy_indicator: CopyIndicator | None = None) -> None:
        self._extractor = extractor
        self._image: ImageSource | None = None
        self._state: ExtractionState = Idle()
        self._generation = 0
        self.copy_indicator = copy_indicator or CopyIndicator()

    @property
    def state(self) -> ExtractionState:
        return self._state

    @property
    def image(self) -> ImageSource | None:
        return self._image

    @property
    def lines(self) -> list[ClassifiedLine]:
        """현재 결과의 분류된 줄 (Succeeded가 아니면 빈 리스트)"""
        if isinstance(self._state, Succeeded):
            return parse_transcript(self._state.raw_text)
        return []

    def begin_selection(self) -> None:
        """새 이미지 읽기 시작. 읽는 동안에도 이전 결과가 표시되지 않도록 바로 Idle로 돌린다."""
        self._generation += 1
        self._image = None
        self._state = Idle()

    def select_image(self, image: ImageSource) -> None:
        """새 이미지 선택. 이전 결과/에러와 진행 중인 요청 결과를 버린다."""
        self._generation += 1
        self._image = image
        self._state = Idle()

    async def extract(self) -> ExtractionState:
        """추출 트리거 (한 번만 시도, 예외를 밖으로 던지지 않음)

        Returns:
            트리거가 끝난 시점의 현재 상태. 도중에 다른 선택/트리거가 끼어들었으면
            이번 결과는 버려지고 그쪽 상태가 반환된다.
        """
        if self._image is None:
            self._state = Idle(message=Messages.NO_IMAGE)
            return self._state

        self._generation += 1
        generation = self._generation
        image = self._image
        self._state = Loading()

        next_state: ExtractionState
        try:
            encoded = await encode(image)
            raw_text = await self._extractor.extract(encoded.data, encoded.media_type)
        except EncodingError as e:
            logger.error(f"[gen {generation}] 이미지 인코딩 실패: {e}")
            next_state = Failed(message=Messages.EXTRACTION_FAILED)
        except ExtractionError as e:
            logger.error(f"[gen {generation}] 텍스트 추출 실패: {e}")
            next_state = Failed(message=Messages.EXTRACTION_FAILED)
        except Exception as e:
            logger.exception(f"[gen {generation}] 예외 발생: {e}")
            next_state = Failed(message=Messages.EXTRACTION_FAILED)
        else:
            next_state = Succeeded(raw_text=raw_text)

        if generation != self._generation:
            logger.info(f"[gen {generation}] 오래된 응답 무시 ({next_state.status})")
            return self._state

        self._state = next_state
        return next_state

    def copy_result(self) -> str | None:
        """성공 결과 원문을 클립보드로 복사. 결과가 없으면 None."""
        if not isinstance(self._state, Succeeded):
            return None
        self.copy_indicator.copy(self._state.raw_text)
        return self._state.raw_text
