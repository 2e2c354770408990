"""어휘적으로 모호하지 않은 화자 패턴: 소유권 재정의와 이름 라벨 감지."""

from __future__ import annotations

import re
from collections.abc import Iterable

from ..models import Speaker

# 나의 전형적인 짧은 대답이나 동의 표현
SELF_PATTERNS: tuple[re.Pattern[str], ...] = tuple(re.compile(p) for p in (
    r"네",
    r"응",
    r"예",
    r"알겠어(요)?",
    r"좋아요?",
    r"괜찮아요?",
    r".*안가도.*되잖아",
    r".*괜찮아요?",
    r".*알겠어요?",
    r".*좋아요?",
))

# 상대방의 전형적인 설명이나 요청 표현
COUNTERPART_PATTERNS: tuple[re.Pattern[str], ...] = tuple(re.compile(p) for p in (
    r".*[가하]려고.*약속했어.*",
    r".*물어보는거야",
    r".*연락할[거게께]",
    r".*해줘.*",
    r".*해봐.*",
    r".*어때\??",
    r".*할거.*",
))

# 이름 라벨 앞에 붙는 화살표, 불릿, 기호
_LABEL_PREFIX = re.compile(r"^[←→↑↓◀▶▲▼<>=•·*\-]+\s*")

OWNERSHIP_TABLE: tuple[tuple[Speaker, tuple[re.Pattern[str], ...]], ...] = (
    (Speaker.self_(), SELF_PATTERNS),
    (Speaker.counterpart(), COUNTERPART_PATTERNS),
)


def classify_ownership(text: str) -> Speaker | None:
    """줄 전체가 소유권 패턴과 일치하면 해당 역할을 반환합니다."""
    for speaker, patterns in OWNERSHIP_TABLE:
        if any(p.fullmatch(text) for p in patterns):
            return speaker
    return None


class NamedSpeakerDetector:
    """짧은 줄의 첫 토큰이 호칭 명사("엄마", "선생님" 등)이면 이름 라벨로 인식합니다.

    "← 엄마", "• 선생님", "엄마:"처럼 화살표나 불릿, 콜론이 붙은 형태도
    라벨로 봅니다. "엄마가", "친구랑"처럼 조사가 붙은 문장은 라벨이 아닙니다.
    """

    def __init__(self, nouns: Iterable[str], max_length: int = 15):
        self.nouns = frozenset(nouns)
        self.max_length = max_length

    def split(self, text: str) -> tuple[str, str] | None:
        """라벨 줄이면 (이름, 나머지 본문)을, 아니면 None을 반환합니다."""
        text = text.strip()
        if len(text) > self.max_length:
            return None
        tokens = _LABEL_PREFIX.sub("", text, count=1).split(maxsplit=1)
        if not tokens:
            return None
        head = tokens[0].rstrip(":：>")
        if head not in self.nouns:
            return None
        body = tokens[1].strip() if len(tokens) > 1 else ""
        return head, body

    def detect(self, text: str) -> str | None:
        label = self.split(text)
        return label[0] if label is not None else None
