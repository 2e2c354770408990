"""종류별 정규식으로 엔티티를 추출합니다. 겹침 제거는 하지 않습니다."""

from __future__ import annotations

import re

from ..models import Entity, EntityKind

ENTITY_PATTERNS: tuple[tuple[EntityKind, re.Pattern[str]], ...] = (
    (EntityKind.PERSON, re.compile(r"[가-힣]{2,4}(?=님|씨)|[A-Za-z]{2,10}(?=님|씨)")),
    (EntityKind.LOCATION, re.compile(r"[가-힣]{1,10}(?:특별시|광역시|시|도|구|군|동|역|읍|면)(?![가-힣])")),
    (EntityKind.ORGANIZATION, re.compile(
        r"[가-힣A-Za-z]{1,15}(?:회사|학교|대학교|병원|은행|센터|협회|재단|그룹|주식회사)(?![가-힣])"
        r"|\(주\)\s?[가-힣A-Za-z]+"
    )),
    (EntityKind.MONEY, re.compile(r"\d[\d,]*\s?(?:만원|억원|원|만|억|조|달러)")),
    (EntityKind.PERCENT, re.compile(r"\d+(?:\.\d+)?\s?(?:%|퍼센트)")),
    (EntityKind.TIME, re.compile(
        r"(?:오전|오후|AM|PM)\s*\d{1,2}:\d{2}|\d{1,2}:\d{2}|\d{1,2}시(?:\s*\d{1,2}분)?"
    )),
    (EntityKind.DATE, re.compile(
        r"\d{4}[-/.]\d{1,2}[-/.]\d{1,2}|\d{4}년\s*\d{1,2}월\s*\d{1,2}일|\d{1,2}월\s*\d{1,2}일"
    )),
    (EntityKind.EMAIL, re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")),
    (EntityKind.PHONE, re.compile(r"\d{2,3}-?\d{3,4}-?\d{4}")),
    (EntityKind.URL, re.compile(r"https?://[\w\-._~:/?#\[\]@!$&'()*+,;=%]+|www\.[\w\-._~/?#=&%]+")),
    (EntityKind.HASHTAG, re.compile(r"#[가-힣a-zA-Z0-9_]+")),
    (EntityKind.MENTION, re.compile(r"@[가-힣a-zA-Z0-9_]+")),
)


def extract_entities(text: str) -> list[Entity]:
    """*text* 전체를 종류별로 스캔하여 모든 일치를 위치와 함께 반환합니다."""
    entities: list[Entity] = []
    for kind, pattern in ENTITY_PATTERNS:
        for match in pattern.finditer(text):
            entities.append(Entity(
                text=match.group(),
                kind=kind,
                start_index=match.start(),
                end_index=match.end(),
            ))
    return entities
