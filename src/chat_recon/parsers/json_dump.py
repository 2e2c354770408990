"""JSON OCR 덤프 파서입니다.

세 가지 모양을 받습니다.

- 줄 객체의 리스트: ``[{"text": ..., "bounding_box": ...}, ...]``
- 래핑된 문서: ``{"lines": [...], "screen_width": 1080}``
- ML Kit 형식: ``{"textBlocks": [{"lines": [{"text": ..., "elements": [...]}]}]}``

키는 snake_case와 camelCase를 모두 허용하며, 바운딩 박스는
``{"left", "top", "right", "bottom"}`` 딕셔너리 또는 4개 항목 리스트입니다.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, ClassVar

from ..models import BoundingBox, OcrDocument, RawLine
from ..utils import get_logger
from .base import BaseParser, extract_date_from_filename

logger = get_logger("parsers.json_dump")

_BOX_KEYS = ("bounding_box", "boundingBox", "box")
_CONFIDENCE_KEYS = ("element_confidence", "elementConfidence")
_WIDTH_KEYS = ("screen_width", "screenWidth", "width")


def _first(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _parse_box(raw: Any) -> BoundingBox | None:
    """딕셔너리 또는 [left, top, right, bottom] 리스트를 BoundingBox로 변환합니다."""
    if raw is None:
        return None
    try:
        if isinstance(raw, dict):
            return BoundingBox(
                left=int(raw["left"]),
                top=int(raw["top"]),
                right=int(raw["right"]),
                bottom=int(raw["bottom"]),
            )
        if isinstance(raw, (list, tuple)) and len(raw) == 4:
            left, top, right, bottom = (int(v) for v in raw)
            return BoundingBox(left=left, top=top, right=right, bottom=bottom)
    except (KeyError, TypeError, ValueError):
        pass
    logger.debug("Ignoring malformed bounding box: %r", raw)
    return None


def _parse_confidence(item: dict[str, Any]) -> tuple[float, ...]:
    values = _first(item, _CONFIDENCE_KEYS)
    if values is None and isinstance(item.get("elements"), list):
        values = [
            element.get("confidence")
            for element in item["elements"]
            if isinstance(element, dict)
        ]
    if values is None and "confidence" in item:
        values = [item["confidence"]]
    if not isinstance(values, list):
        return ()

    parsed: list[float] = []
    for value in values:
        try:
            parsed.append(float(value))
        except (TypeError, ValueError):
            continue
    return tuple(parsed)


def _parse_line(item: Any) -> RawLine | None:
    if isinstance(item, str):
        return RawLine(text=item)
    if not isinstance(item, dict) or not isinstance(item.get("text"), str):
        return None
    return RawLine(
        text=item["text"],
        bounding_box=_parse_box(_first(item, _BOX_KEYS)),
        element_confidence=_parse_confidence(item),
    )


def _collect_line_items(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"Unsupported JSON dump root: {type(data).__name__}")
    if isinstance(data.get("lines"), list):
        return data["lines"]
    blocks = data.get("textBlocks", data.get("text_blocks"))
    if isinstance(blocks, list):
        return [
            line
            for block in blocks
            if isinstance(block, dict)
            for line in block.get("lines", [])
        ]
    raise ValueError("JSON dump has neither 'lines' nor 'textBlocks'")


class JsonDumpParser(BaseParser):
    """OCR 엔진이 내보낸 JSON 덤프를 파싱합니다."""

    extensions: ClassVar[list[str]] = [".json"]

    def parse(self, path: Path) -> OcrDocument:
        """JSON 덤프를 읽어 OcrDocument를 반환합니다.

        매개변수
        ----------
        path:
            JSON 파일 경로입니다.

        반환값
        -------
        OcrDocument
            화면 순서대로의 줄과 선택적 화면 너비를 담은 문서입니다.

        예외
        ------
        FileNotFoundError
            *path*가 존재하지 않으면 발생합니다.
        ValueError
            JSON이 올바르지 않거나 알려진 모양이 아니면 발생합니다.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON dump not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc

        items = _collect_line_items(data)
        lines: list[RawLine] = []
        skipped = 0
        for item in items:
            line = _parse_line(item)
            if line is None:
                skipped += 1
                continue
            lines.append(line)
        if skipped:
            logger.warning("Skipped %d malformed line entries in %s", skipped, path.name)

        screen_width = None
        metadata: dict[str, Any] = {}
        if isinstance(data, dict):
            raw_width = _first(data, _WIDTH_KEYS)
            if isinstance(raw_width, (int, float)) and raw_width > 0:
                screen_width = int(raw_width)
            if isinstance(data.get("metadata"), dict):
                metadata.update(data["metadata"])

        captured = extract_date_from_filename(path.stem)
        if captured:
            metadata.setdefault("date", captured)

        logger.debug("Read %d lines from %s (screen_width=%s)", len(lines), path.name, screen_width)
        return OcrDocument(
            doc_id=path.name,
            lines=lines,
            screen_width=screen_width,
            metadata=metadata,
        )
