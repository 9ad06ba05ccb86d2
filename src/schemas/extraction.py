"""추출 요청 상태 모델

Orchestrator가 들고 있는 단일 상태 슬롯. idle/loading/succeeded/failed 중
정확히 하나이며, 전이할 때마다 새 인스턴스로 교체된다.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class EncodedImage(BaseModel):
    """전송용 인라인 이미지 (base64 + 선언된 media type)"""

    model_config = ConfigDict(frozen=True)

    data: str
    media_type: str


class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"
    message: str | None = None  # 검증 실패 안내 (이미지 미선택)


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"


class Succeeded(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["succeeded"] = "succeeded"
    raw_text: str


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    message: str = Field(min_length=1)


ExtractionState = Annotated[Idle | Loading | Succeeded | Failed, Field(discriminator="status")]
ExtractionStatus = Literal["idle", "loading", "succeeded", "failed"]
