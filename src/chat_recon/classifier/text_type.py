"""우선순위 규칙표에 따른 텍스트 타입 분류."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from ..models import TextType


def _balanced_braces(text: str) -> bool:
    """중괄호가 한 쌍 이상 있고 올바르게 닫히면 True."""
    depth = 0
    pairs = 0
    for ch in text:
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                return False
            depth -= 1
            pairs += 1
    return depth == 0 and pairs > 0


@dataclass(frozen=True)
class TextTypeRule:
    """한 텍스트 타입의 판정 규칙.

    *markers* 중 하나를 포함하거나 *patterns* 중 하나가 검색되거나 *check*가
    참이면 일치합니다. *excludes*를 포함하면 일치하지 않습니다.
    """

    text_type: TextType
    markers: tuple[str, ...] = ()
    patterns: tuple[re.Pattern[str], ...] = ()
    excludes: tuple[str, ...] = ()
    check: Callable[[str], bool] | None = field(default=None, compare=False)

    def matches(self, text: str) -> bool:
        if any(ex in text for ex in self.excludes):
            return False
        if any(m in text for m in self.markers):
            return True
        if any(p.search(text) for p in self.patterns):
            return True
        return self.check is not None and self.check(text)


# 위에서 아래로 평가하며 처음 일치한 타입을 사용한다
TEXT_TYPE_RULES: tuple[TextTypeRule, ...] = (
    TextTypeRule(
        TextType.QUESTION,
        markers=("?", "어떻게", "언제", "어디서", "왜", "무엇", "뭐", "어떤"),
    ),
    TextTypeRule(
        TextType.URL,
        markers=("http://", "https://", "www.", ".com", ".kr", ".net"),
    ),
    TextTypeRule(
        TextType.PHONE_NUMBER,
        patterns=(re.compile(r"\d{2,3}-?\d{3,4}-?\d{4}"),),
    ),
    TextTypeRule(
        TextType.EMAIL,
        patterns=(re.compile(r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}"),),
    ),
    TextTypeRule(
        TextType.DATE_TIME,
        patterns=(
            re.compile(r"\d{4}[-/]\d{1,2}[-/]\d{1,2}"),
            re.compile(r"\d{1,2}시\s*\d{1,2}분"),
            re.compile(r"\d{1,2}:\d{2}"),
            re.compile(r"(?:오전|오후)\s*\d"),
            re.compile(r"\d{1,2}월\s*\d{1,2}일"),
            re.compile(r"\d{4}년"),
        ),
    ),
    TextTypeRule(
        TextType.NUMBER,
        patterns=(re.compile(r"\d"),),
        excludes=("http",),
    ),
    TextTypeRule(
        TextType.CODE,
        markers=("function", "class", "import", "def ", "public", "private"),
        check=_balanced_braces,
    ),
    TextTypeRule(
        TextType.MESSAGE,
        markers=("안녕", "고마워", "미안", "ㅋ", "ㅎ", "ㅠ", "ㅜ"),
    ),
)


def classify_text_type(text: str) -> TextType:
    """소문자화한 *text*에 규칙표를 순서대로 적용합니다."""
    clean = text.strip().lower()
    for rule in TEXT_TYPE_RULES:
        if rule.matches(clean):
            return rule.text_type
    return TextType.GENERAL_TEXT
