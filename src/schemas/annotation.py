"""마커 주석 프로토콜 데이터 모델

추출 서비스가 돌려준 전사 텍스트의 각 줄은 맨 앞 마커 문자 하나로
의미(말풍선, 나레이션, 효과음 등)를 표시한다.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from src.schemas.base import BaseSchema

MarkerCategory = Literal[
    "dialogue",
    "thought",
    "narration",
    "sound_effect",
    "scream",
    "system",
    "uncategorized",
]


class LegendEntry(BaseSchema):
    """범례 항목 (마커 1글자 + 설명 + 표시 힌트)"""

    model_config = ConfigDict(frozen=True)

    marker: str
    category: MarkerCategory
    label: str
    display_hint: str


class ClassifiedLine(BaseModel):
    """분류된 전사 한 줄

    마커가 매칭되지 않은 줄은 marker/category/label이 모두 None이고
    text는 원본 줄 그대로 (trim 없음).
    """

    model_config = ConfigDict(frozen=True)

    marker: str | None = None
    category: MarkerCategory | None = None
    label: str | None = None
    text: str


class RenderedLine(BaseSchema):
    """화면 표시용 줄 (ClassifiedLine + 표시 힌트)"""

    marker: str | None = None
    category: MarkerCategory | None = None
    label: str | None = None
    text: str
    display_hint: str | None = None
