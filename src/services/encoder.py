"""이미지 인코더: 선택된 이미지 → 인라인 전송 형식(base64 + media type)

내용/크기 검증은 하지 않는다. media type은 선언된 값만 사용 (바이트 스니핑 없음).
"""

import base64
from dataclasses import dataclass
from typing import Protocol

from src.constants import MediaType
from src.schemas.extraction import EncodedImage


class EncodingError(Exception):
    pass


class ImageSource(Protocol):
    """선택된 이미지 파일 인터페이스

    구현체:
    - fastapi.UploadFile: 요청 한 번으로 끝나는 업로드
    - StoredImage: 세션에 보관되는 선택 이미지
    """

    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes: ...


@dataclass(frozen=True)
class StoredImage:
    """메모리에 보관된 선택 이미지 (세션 요청 간 유지)"""

    filename: str | None
    content_type: str | None
    data: bytes

    async def read(self, size: int = -1) -> bytes:
        if size < 0:
            return self.data
        return self.data[:size]

    @classmethod
    async def from_source(cls, source: ImageSource) -> "StoredImage":
        """
        Raises:
            EncodingError: 파일 읽기 실패 시
        """
        data = await _read_all(source)
        return cls(filename=source.filename, content_type=source.content_type, data=data)


async def _read_all(source: ImageSource) -> bytes:
    try:
        return await source.read()
    except (OSError, ValueError) as e:
        raise EncodingError(f"이미지 읽기 실패: {source.filename or 'unknown'} - {e}") from e


async def encode(image: ImageSource) -> EncodedImage:
    """이미지를 base64로 인코딩

    Raises:
        EncodingError: 파일 읽기 실패 시 (호출자에게 그대로 전파)
    """
    content = await _read_all(image)

    return EncodedImage(
        data=base64.b64encode(content).decode("ascii"),
        media_type=image.content_type or MediaType.FALLBACK,
    )
