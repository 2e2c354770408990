"""OCR 줄 단위 화자 귀속.

우선순위:
1. 이름 라벨 감지: 짧은 줄의 첫 토큰이 호칭 명사이면 라벨 줄로 소비
2. 소유권 재정의: 모호하지 않은 문구 패턴이 투표 결과를 덮어씀
3. 가중 투표: 위치(3), 어휘(2), 시간 인접(1)의 합산
4. 교대 추정: 어떤 신호도 없을 때 직전 화자의 반대편
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import AttributionConfig

from ..models import AttributedLine, AttributionSignals, RawLine, Speaker, SpeakerKind
from ..utils import get_logger
from .ownership import NamedSpeakerDetector, classify_ownership
from .signals import lexical_vote, position_vote, time_vote

logger = get_logger("speaker.attributor")


class SpeakerAttributor:
    """노이즈가 제거된 줄마다 화자 역할을 귀속합니다.

    상태를 갖지 않으므로 여러 스크린샷에 대해 동시에 호출해도 안전합니다.
    """

    def __init__(self, config: AttributionConfig, short_line_max_length: int = 3):
        self.config = config
        self.short_line_max_length = short_line_max_length
        self.detector = NamedSpeakerDetector(config.kinship_nouns, config.named_max_length)

    # ------------------------------------------------------------------
    # 화면 너비
    # ------------------------------------------------------------------

    @staticmethod
    def infer_screen_width(lines: Sequence[RawLine]) -> float | None:
        """유효한 박스 중 가장 오른쪽 끝을 화면 너비로 추정합니다."""
        rights = [
            line.bounding_box.right
            for line in lines
            if line.bounding_box is not None and line.bounding_box.is_valid()
        ]
        return float(max(rights)) if rights else None

    def resolve_screen_width(
        self, lines: Sequence[RawLine], screen_width: float | None = None
    ) -> float | None:
        """인자, 설정 순으로 화면 너비를 정합니다.

        둘 다 없으면 None이며 위치 신호는 투표하지 않습니다. 박스에서 너비를
        추정하려면 ``infer_screen_width``를 켭니다.
        """
        if screen_width:
            return float(screen_width)
        if self.config.screen_width:
            return float(self.config.screen_width)
        if self.config.infer_screen_width:
            return self.infer_screen_width(lines)
        return None

    # ------------------------------------------------------------------
    # 단일 줄
    # ------------------------------------------------------------------

    def attribute(
        self,
        line: RawLine,
        prior: Sequence[AttributedLine] = (),
        screen_width: float | None = None,
    ) -> AttributedLine:
        """*line*의 화자를 결정합니다.

        매개변수
        ----------
        line:
            노이즈 필터를 통과한 OCR 줄입니다.
        prior:
            같은 스크린샷에서 이미 귀속된 줄입니다 (입력 순서).
        screen_width:
            바운딩 박스 좌표계의 화면 너비입니다. None이면 위치 신호를 건너뜁니다.
        """
        text = line.text.strip()

        label = self.detector.split(text)
        if label is not None:
            name, body = label
            return AttributedLine(
                line=line,
                text=body,
                speaker=Speaker.named(name),
                signals=AttributionSignals(named=name),
                is_label=True,
            )

        zone, position = position_vote(
            line.bounding_box,
            screen_width,
            self.config.left_threshold,
            self.config.right_threshold,
        )

        override = classify_ownership(text)
        if override is not None:
            signals = AttributionSignals(zone=zone, position=position, override=override)
            if signals.override_conflict:
                logger.debug("Override %s contradicts position %s: %r",
                             override.kind.value, position.kind.value, text)
            return AttributedLine(line=line, text=text, speaker=override, signals=signals)

        lexical = lexical_vote(text)
        timed = time_vote(text)

        votes: dict[SpeakerKind, int] = {}
        for vote, weight in (
            (position, self.config.position_weight),
            (lexical, self.config.lexical_weight),
            (timed, self.config.time_weight),
        ):
            if vote is not None and weight:
                votes[vote.kind] = votes.get(vote.kind, 0) + weight

        if votes:
            best = max(votes.values())
            winners = [kind for kind, score in votes.items() if score == best]
            speaker = Speaker(winners[0]) if len(winners) == 1 else Speaker.unknown()
            signals = AttributionSignals(
                zone=zone, position=position, lexical=lexical, time=timed, votes=votes
            )
        else:
            speaker = self._alternate(prior)
            signals = AttributionSignals(zone=zone, fallback=True)

        return AttributedLine(line=line, text=text, speaker=speaker, signals=signals)

    @staticmethod
    def _alternate(prior: Sequence[AttributedLine]) -> Speaker:
        """2인 교대 가정으로 직전 화자의 반대편을 반환합니다."""
        for previous in reversed(prior):
            if previous.is_label:
                # 이름 라벨 바로 아래 말풍선은 그 사람의 것
                return Speaker.counterpart()
            if previous.speaker.slot is SpeakerKind.SELF:
                return Speaker.counterpart()
            if previous.speaker.slot is SpeakerKind.COUNTERPART:
                return Speaker.self_()
        return Speaker.self_()

    # ------------------------------------------------------------------
    # 전체 줄
    # ------------------------------------------------------------------

    def attribute_all(
        self, lines: Sequence[RawLine], screen_width: float | None = None
    ) -> list[AttributedLine]:
        """모든 줄을 순서대로 귀속합니다.

        귀속할 수 없는 짧은 줄(3자 이하이면서 화자가 UNKNOWN)은 결과에서 제외됩니다.
        """
        width = self.resolve_screen_width(lines, screen_width)
        attributed: list[AttributedLine] = []
        for line in lines:
            result = self.attribute(line, attributed, width)
            if (
                not result.is_label
                and result.speaker.kind is SpeakerKind.UNKNOWN
                and len(result.text) <= self.short_line_max_length
            ):
                logger.debug("Dropped unattributable short line: %r", result.text)
                continue
            logger.debug("%r → %s (%s)", result.text, result.speaker.kind.value,
                         result.signals.describe())
            attributed.append(result)

        logger.info("Attributed %d/%d lines (screen width: %s)",
                    len(attributed), len(lines), width)
        return attributed
