"""OCR 신뢰도와 메시지별 화자 귀속 신뢰도 계산."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import ScoringConfig

from .models import Message, RawLine, ScreenZone
from .speaker.signals import ZONE_SPEAKERS
from .utils import clamp, get_logger

logger = get_logger("scorer")


class ConfidenceScorer:
    """휴리스틱 조정값으로 0~1 범위의 신뢰도를 산출합니다."""

    def __init__(self, config: ScoringConfig):
        self.config = config

    def ocr_confidence(self, lines: Sequence[RawLine]) -> float:
        """모든 하위 토큰 신뢰도의 산술 평균. 값이 없으면 기본값을 반환합니다."""
        values = [
            clamp(float(value))
            for line in lines
            for value in line.element_confidence
            if value is not None and math.isfinite(value)
        ]
        if not values:
            return self.config.default_ocr_confidence
        return clamp(sum(values) / len(values))

    @staticmethod
    def dominant_zone(message: Message) -> ScreenZone | None:
        """메시지를 이루는 줄들의 위치 판정 중 단독 최다 영역."""
        zones = Counter(
            item.signals.zone for item in message.lines if item.signals.zone is not None
        )
        if not zones:
            return None
        ranked = zones.most_common(2)
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            return None
        return ranked[0][0]

    def score(self, message: Message) -> float:
        """메시지의 화자 귀속 신뢰도를 계산합니다.

        기본 0.5에서 시작해 위치 판정과 화자가 일치하면 +0.3, 본문이 50자를
        넘으면 +0.1, 10자 미만이면 -0.1, 시각 정보가 있으면 +0.1 후 [0, 1]로 자릅니다.
        """
        cfg = self.config
        confidence = cfg.base

        zone = self.dominant_zone(message)
        if zone is not None and ZONE_SPEAKERS[zone].slot == message.speaker.slot:
            confidence += cfg.position_bonus

        length = len(message.text)
        if length > cfg.long_text_chars:
            confidence += cfg.long_text_bonus
        elif length < cfg.short_text_chars:
            confidence -= cfg.short_text_penalty

        if message.time_info is not None:
            confidence += cfg.time_bonus

        return clamp(confidence)

    def score_all(self, messages: Sequence[Message]) -> list[Message]:
        """신뢰도를 채운 새 메시지 목록을 반환합니다."""
        scored = [replace(m, attribution_confidence=self.score(m)) for m in messages]
        if scored:
            mean = sum(m.attribution_confidence for m in scored) / len(scored)
            logger.info("Scored %d messages (mean attribution confidence: %.2f)",
                        len(scored), mean)
        return scored
