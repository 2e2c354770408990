"""여러 단계에서 공유하는 시각 정규식."""

from __future__ import annotations

import re

# 줄 전체가 시각 표기인지 판정 (노이즈 필터)
TIME_LINE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"오후\s*\d{1,2}:\d{2}"),
    re.compile(r"오전\s*\d{1,2}:\d{2}"),
    re.compile(r"\d{1,2}:\d{2}"),
    re.compile(r"\d{1,2}시\s*\d{1,2}분"),
    re.compile(r"AM\s*\d{1,2}:\d{2}"),
    re.compile(r"PM\s*\d{1,2}:\d{2}"),
)

# 줄 안에 시각이 섞여 있는지 판정 (시간 인접 신호)
CLOCK_TIME = re.compile(r"(?:오전|오후)?\s*\d{1,2}:\d{2}")

# 메시지의 time_info 추출 순서 (시각만, 날짜는 제외)
TIME_INFO_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:오전|오후)\s*\d{1,2}:\d{2}"),
    re.compile(r"\d{1,2}:\d{2}"),
    re.compile(r"\d{1,2}시\s*\d{1,2}분"),
)


def is_time_line(text: str) -> bool:
    """*text* 전체가 시각 표기이면 True를 반환합니다."""
    return any(p.fullmatch(text) for p in TIME_LINE_PATTERNS)


def has_clock_time(text: str) -> bool:
    return CLOCK_TIME.search(text) is not None


def extract_time_info(text: str) -> str | None:
    """*text*에서 처음 일치하는 시각 문자열을 그대로 반환합니다."""
    for pattern in TIME_INFO_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group()
    return None
