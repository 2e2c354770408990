"""화자 투표 신호: 위치, 어휘, 시간 인접.

각 신호는 독립적으로 한 역할에 투표하거나 기권합니다. 가중치 합산은
:class:`~chat_recon.speaker.attributor.SpeakerAttributor`가 담당합니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import BoundingBox, ScreenZone, Speaker
from ..patterns import has_clock_time

# 한 글자 대명사는 다른 음절에 붙어 있으면 무시한다 ("나중", "하나")
_PRONOUN = r"(?<![가-힣]){}(?:는|도|랑|한테|의)?(?![가-힣])"


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


@dataclass(frozen=True)
class LexicalFamily:
    """한 역할을 가리키는 어휘 패턴 묶음."""

    speaker: Speaker
    patterns: tuple[re.Pattern[str], ...]

    def score(self, text: str) -> int:
        """*text*에서 일치하는 패턴 수를 반환합니다."""
        return sum(1 for p in self.patterns if p.search(text))


LEXICAL_FAMILIES: tuple[LexicalFamily, ...] = (
    LexicalFamily(
        Speaker.self_(),
        _compile(_PRONOUN.format("나"), "내가", "저는", "제가", "저희", "우리"),
    ),
    LexicalFamily(
        Speaker.counterpart(),
        _compile(
            _PRONOUN.format("너"), "당신", "자네", "그대",
            "어떻게", "언제", "어디서", "왜", "무엇", "뭐",
        ),
    ),
    LexicalFamily(
        Speaker.system(),
        _compile("입장", "퇴장", "초대", "추방", "관리자", "알림", "시스템", "공지"),
    ),
)

ZONE_SPEAKERS: dict[ScreenZone, Speaker] = {
    ScreenZone.RIGHT: Speaker.self_(),
    ScreenZone.LEFT: Speaker.counterpart(),
    ScreenZone.CENTER: Speaker.system(),
}


def screen_zone(
    box: BoundingBox | None,
    screen_width: float | None,
    left_threshold: float = 0.3,
    right_threshold: float = 0.7,
) -> ScreenZone | None:
    """박스 중심이 놓인 가로 영역을 반환합니다. 박스가 없거나 잘못되면 None."""
    if box is None or not screen_width or screen_width <= 0:
        return None
    if not box.is_valid(screen_width):
        return None
    ratio = box.center_x / screen_width
    if ratio > right_threshold:
        return ScreenZone.RIGHT
    if ratio < left_threshold:
        return ScreenZone.LEFT
    return ScreenZone.CENTER


def position_vote(
    box: BoundingBox | None,
    screen_width: float | None,
    left_threshold: float = 0.3,
    right_threshold: float = 0.7,
) -> tuple[ScreenZone | None, Speaker | None]:
    zone = screen_zone(box, screen_width, left_threshold, right_threshold)
    if zone is None:
        return None, None
    return zone, ZONE_SPEAKERS[zone]


def lexical_vote(text: str) -> Speaker | None:
    """점수가 가장 높은 어휘 묶음의 역할. 동점이거나 모두 0이면 None."""
    scored = [(family.score(text), family.speaker) for family in LEXICAL_FAMILIES]
    best = max(score for score, _ in scored)
    if best == 0:
        return None
    winners = [speaker for score, speaker in scored if score == best]
    if len(winners) > 1:
        return None
    return winners[0]


def time_vote(text: str) -> Speaker | None:
    # 대상 메신저에서는 시각이 상대방 말풍선 옆에 붙는 경우가 많다
    if has_clock_time(text):
        return Speaker.counterpart()
    return None
