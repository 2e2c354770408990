"""재구성된 대화 텍스트의 내용 분류기."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import ClassifierConfig

from ..models import ClassificationResult
from ..utils import clamp, get_logger
from .entities import extract_entities
from .lexical import detect_language, extract_keywords
from .text_type import classify_text_type

logger = get_logger("classifier")


class ContentClassifier:
    """텍스트 타입, 언어, 엔티티, 키워드를 한 번에 산출합니다.

    LLM 의존성이 없으며 순수 계산만 수행합니다.
    """

    def __init__(self, config: ClassifierConfig):
        self.config = config

    def classify(self, text: str, ocr_confidence: float = 0.5) -> ClassificationResult:
        """*text* 전체를 분류합니다.

        엔티티 추출은 텍스트 타입과 무관하게 전체 텍스트를 대상으로 합니다.
        빈 텍스트는 GENERAL_TEXT와 빈 엔티티/키워드 목록을 돌려줍니다.
        """
        result = ClassificationResult(
            text_type=classify_text_type(text),
            language=detect_language(text),
            entities=extract_entities(text),
            keywords=extract_keywords(text, self.config.stopwords, self.config.max_keywords),
            ocr_confidence=clamp(ocr_confidence),
        )
        logger.info(
            "Classified as %s (language: %s, %d entities, keywords: %s)",
            result.text_type.value,
            result.language.value,
            len(result.entities),
            result.keywords,
        )
        return result
