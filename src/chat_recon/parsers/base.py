"""OCR 덤프 파서 ABC와 확장자별 레지스트리."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from rich.progress import track

from ..models import OcrDocument
from ..utils import console, get_logger

logger = get_logger("parsers.base")

# 스크린샷 파일명의 YYYYMMDD 또는 YYMMDD (예: "Screenshot_20240115-154300.json")
_LONG_DATE_PATTERN = re.compile(r"(20\d{2})(0[1-9]|1[0-2])(0[1-9]|[12]\d|3[01])")
_SHORT_DATE_PATTERN = re.compile(r"(\d{2})(0[1-9]|1[0-2])(0[1-9]|[12]\d|3[01])")


def extract_date_from_filename(filename: str) -> str | None:
    """파일명에서 캡처 날짜를 추출하여 YYYY-MM-DD 형식으로 반환합니다.

    YYYYMMDD를 먼저 찾고, 없으면 2000년대를 가정한 YYMMDD를 찾습니다.
    유효한 패턴이 없으면 None을 반환합니다.
    """
    match = _LONG_DATE_PATTERN.search(filename)
    if match:
        yyyy, mm, dd = match.groups()
        return f"{yyyy}-{mm}-{dd}"
    match = _SHORT_DATE_PATTERN.search(filename)
    if match:
        yy, mm, dd = match.groups()
        return f"20{yy}-{mm}-{dd}"
    return None


class BaseParser(ABC):
    """OCR 덤프 파서. *extensions*에 처리할 확장자를 소문자로 적습니다."""

    extensions: ClassVar[list[str]] = []

    @abstractmethod
    def parse(self, path: Path) -> OcrDocument:
        ...

    def can_parse(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions


class ParserRegistry:
    """확장자 하나에 파서 하나를 대응시키는 표입니다.

    ``register``는 데코레이터로도 쓸 수 있으며, 이미 다른 파서가 맡은
    확장자를 다시 등록하면 ValueError를 냅니다.
    """

    def __init__(self) -> None:
        self._by_extension: dict[str, BaseParser] = {}

    def register(self, parser_cls: type[BaseParser]) -> type[BaseParser]:
        parser = parser_cls()
        for extension in parser_cls.extensions:
            extension = extension.lower()
            owner = self._by_extension.get(extension)
            if owner is not None:
                raise ValueError(
                    f"{extension} is already handled by {type(owner).__name__}"
                )
            self._by_extension[extension] = parser
        logger.debug("Registered %s for %s", parser_cls.__name__, parser_cls.extensions)
        return parser_cls

    @property
    def extensions(self) -> list[str]:
        return sorted(self._by_extension)

    def get_parser(self, path: Path) -> BaseParser | None:
        return self._by_extension.get(Path(path).suffix.lower())

    def parse_file(self, path: Path) -> OcrDocument:
        """확장자에 맞는 파서로 덤프 하나를 읽습니다.

        예외
        ------
        ValueError
            확장자를 처리할 파서가 없으면 발생합니다.
        """
        path = Path(path)
        parser = self.get_parser(path)
        if parser is None:
            raise ValueError(f"Unsupported OCR dump format: {path.suffix or path.name}")
        return parser.parse(path)

    def find_dumps(self, dir_path: Path) -> list[Path]:
        """*dir_path* 바로 아래의 지원 덤프를 이름순으로 반환합니다."""
        return sorted(
            path
            for path in Path(dir_path).iterdir()
            if path.is_file() and self.get_parser(path) is not None
        )

    def parse_directory(self, dir_path: Path) -> list[OcrDocument]:
        """디렉토리의 덤프를 모두 읽습니다. 읽지 못한 덤프는 로그를 남기고 건너뜁니다."""
        dir_path = Path(dir_path)
        if not dir_path.is_dir():
            logger.error("Directory not found: %s", dir_path)
            return []

        dumps = self.find_dumps(dir_path)
        if not dumps:
            logger.warning("No OCR dumps (%s) in %s", ", ".join(self.extensions), dir_path)
            return []

        documents: list[OcrDocument] = []
        for path in track(dumps, description="Parsing OCR dumps", console=console, transient=True):
            try:
                documents.append(self.parse_file(path))
            except (OSError, RuntimeError, ValueError):
                logger.exception("Skipping unreadable dump %s", path.name)

        logger.info("Parsed %d / %d dumps from %s", len(documents), len(dumps), dir_path)
        return documents
