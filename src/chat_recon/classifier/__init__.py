"""내용 분류: 텍스트 타입, 언어, 엔티티, 키워드."""

from .content import ContentClassifier
from .entities import extract_entities
from .lexical import detect_language, extract_keywords
from .text_type import TEXT_TYPE_RULES, TextTypeRule, classify_text_type

__all__ = [
    "ContentClassifier",
    "TEXT_TYPE_RULES",
    "TextTypeRule",
    "classify_text_type",
    "detect_language",
    "extract_entities",
    "extract_keywords",
]
