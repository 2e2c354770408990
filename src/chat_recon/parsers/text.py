"""일반 텍스트 덤프 파서: 한 줄이 하나의 OCR 줄입니다 (위치 정보 없음)."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

from ..models import OcrDocument, RawLine
from ..utils import get_logger
from .base import BaseParser, extract_date_from_filename

logger = get_logger("parsers.text")


def _detect_encoding(content: bytes) -> str:
    """콘텐츠에서 인코딩을 감지하고, 폴백은 cp949입니다."""
    try:
        content.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    # 한국어 윈도우 환경에서 저장된 덤프
    return "cp949"


class TextDumpParser(BaseParser):
    """OCR 엔진이 내보낸 일반 텍스트를 파싱합니다."""

    extensions: ClassVar[list[str]] = [".txt"]

    def parse(self, path: Path) -> OcrDocument:
        """비어 있지 않은 각 줄을 바운딩 박스 없는 RawLine으로 만듭니다.

        예외
        ------
        FileNotFoundError
            *path*가 존재하지 않으면 발생합니다.
        RuntimeError
            파일을 읽을 수 없으면 발생합니다.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Text dump not found: {path}")

        try:
            raw_content = path.read_bytes()
            content = raw_content.decode(_detect_encoding(raw_content))
        except Exception as exc:
            raise RuntimeError(f"Failed to read text dump: {path}") from exc

        lines = [RawLine(text=line) for line in content.splitlines() if line.strip()]

        metadata: dict[str, object] = {}
        captured = extract_date_from_filename(path.stem)
        if captured:
            metadata["date"] = captured

        logger.debug("Read %d lines from %s", len(lines), path.name)
        return OcrDocument(doc_id=path.name, lines=lines, metadata=metadata)
