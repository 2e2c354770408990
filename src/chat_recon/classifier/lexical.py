"""문자 구성 기반 언어 판정과 빈도 기반 키워드 추출."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

from ..models import Language

_HANGUL = re.compile(r"[가-힣]")
_LATIN = re.compile(r"[a-zA-Z]")
_DIGIT = re.compile(r"[0-9]")
_KEYWORD_TOKEN = re.compile(r"[가-힣a-zA-Z0-9]+")


def detect_language(text: str) -> Language:
    """한글 음절, 라틴 문자, 숫자 중 개수가 단독 최다인 쪽. 동점이나 0이면 MIXED."""
    counts = [
        (len(_HANGUL.findall(text)), Language.KO),
        (len(_LATIN.findall(text)), Language.EN),
        (len(_DIGIT.findall(text)), Language.NUMBER),
    ]
    best = max(count for count, _ in counts)
    if best == 0:
        return Language.MIXED
    winners = [lang for count, lang in counts if count == best]
    return winners[0] if len(winners) == 1 else Language.MIXED


def extract_keywords(text: str, stopwords: Iterable[str], limit: int = 5) -> list[str]:
    """공백 토큰 중 상위 *limit*개를 빈도순으로 반환합니다 (동률은 먼저 나온 순)."""
    stop = set(stopwords)
    words = [
        token
        for token in text.split()
        if len(token) > 1 and token not in stop and _KEYWORD_TOKEN.fullmatch(token)
    ]
    # Counter는 삽입 순서를 보존하고 most_common은 안정 정렬이다
    return [word for word, _ in Counter(words).most_common(limit)]
