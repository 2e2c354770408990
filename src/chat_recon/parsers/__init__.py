"""다양한 형식의 OCR 덤프 파서입니다."""

from .base import BaseParser, ParserRegistry
from .json_dump import JsonDumpParser
from .text import TextDumpParser

__all__ = [
    "BaseParser",
    "ParserRegistry",
    "JsonDumpParser",
    "TextDumpParser",
]

registry = ParserRegistry()
registry.register(JsonDumpParser)
registry.register(TextDumpParser)
