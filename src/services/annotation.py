"""마커 주석 프로토콜 파서/렌더러

추출 서비스가 돌려준 전사 텍스트를 줄 단위로 나누고, 각 줄의 첫 글자를
범례 마커와 정확히 비교해 분류한다.

규칙:
- "\\n"으로만 분리 ("\\r\\n" 정규화 없음, "\\r"은 줄 내용에 남는다)
- 매칭: 첫 글자 제거 후 앞뒤 공백 trim
- 비매칭: 원본 줄 그대로 (trim 없음)
- "_"(미분류)는 범례 설명용 항목일 뿐 매칭 대상이 아니다.
  "_"로 시작하는 줄도 비매칭으로 떨어진다.
"""

from src.schemas.annotation import ClassifiedLine, LegendEntry, RenderedLine

UNCATEGORIZED_MARKER = "_"

MARKER_LEGEND: tuple[LegendEntry, ...] = (
    LegendEntry(marker="#", category="dialogue", label="نص داخل فقاعة كلام عادية", display_hint="cyan"),
    LegendEntry(marker="$", category="thought", label="نص داخل فقاعة تفكير أو همس", display_hint="purple"),
    LegendEntry(marker="&", category="narration", label="نص داخل مربع السرد", display_hint="amber"),
    LegendEntry(marker="(", category="sound_effect", label="مؤثرات صوتية (SFX)", display_hint="orange"),
    LegendEntry(marker=")", category="scream", label="نص داخل فقاعة صراخ", display_hint="red"),
    LegendEntry(marker="/", category="system", label="نص داخل فقاعة نظام أو شاشة معلومات", display_hint="green"),
    LegendEntry(marker=UNCATEGORIZED_MARKER, category="uncategorized", label="نص آخر غير مصنف", display_hint="gray"),
)


def _build_matchers(legend: tuple[LegendEntry, ...]) -> dict[str, LegendEntry]:
    seen: set[str] = set()
    matchers: dict[str, LegendEntry] = {}
    for entry in legend:
        if len(entry.marker) != 1:
            raise ValueError(f"마커는 한 글자여야 합니다: {entry.marker!r}")
        if entry.marker in seen:
            raise ValueError(f"중복 마커: {entry.marker!r}")
        seen.add(entry.marker)
        if entry.marker != UNCATEGORIZED_MARKER:
            matchers[entry.marker] = entry
    return matchers


_MATCHERS = _build_matchers(MARKER_LEGEND)


def get_legend() -> list[LegendEntry]:
    """표시 순서대로 범례 반환"""
    return list(MARKER_LEGEND)


def classify_line(line: str) -> ClassifiedLine:
    entry = _MATCHERS.get(line[:1])
    if entry is None:
        return ClassifiedLine(text=line)

    return ClassifiedLine(
        marker=entry.marker,
        category=entry.category,
        label=entry.label,
        text=line[1:].strip(),
    )


def parse_transcript(text: str) -> list[ClassifiedLine]:
    """전사 텍스트 → 분류된 줄 리스트 (원본 순서 유지)

    빈 전사는 빈 리스트. "결과 없음" 표시는 호출 측 몫.
    """
    if not text:
        return []
    return [classify_line(line) for line in text.split("\n")]


def render_lines(lines: list[ClassifiedLine]) -> list[RenderedLine]:
    """분류된 줄에 범례의 표시 힌트를 붙인다"""
    rendered: list[RenderedLine] = []
    for line in lines:
        entry = _MATCHERS.get(line.marker) if line.marker is not None else None
        rendered.append(
            RenderedLine(
                marker=line.marker,
                category=line.category,
                label=line.label,
                text=line.text,
                display_hint=entry.display_hint if entry is not None else None,
            )
        )
    return rendered
