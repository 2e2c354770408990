"""OCR 줄에 대한 규칙 기반 노이즈 필터."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import NoiseFilterConfig

from ..models import RawLine
from ..patterns import is_time_line
from ..utils import get_logger

logger = get_logger("noise.rules")

_URL_MARKERS = ("http", "www.", ".com", ".kr", "://", "/")
_NUMERIC_NOISE = re.compile(r"[\d\s+\-*/=.]+")
_BARE_JAMO = re.compile(r"[ㄱ-ㅎㅏ-ㅣ\s]+")
_HANGUL_WORD = re.compile(r"[가-힣]+")


@dataclass
class FilterResult:
    """한 줄에 대한 노이즈 판정 결과."""
    passed: bool
    reason: str | None = None


class NoiseFilter:
    """설정 가능한 규칙으로 OCR 잡음을 제거합니다.

    적용되는 규칙 (순서대로, 처음 일치한 규칙에서 멈춤):
    1. time: 줄 전체가 시각 표기 (오후 4:43, 12:30, 3시 20분, PM 4:43)
    2. url: http, www., .com, .kr, ://, / 중 하나를 포함
    3. numeric: 숫자/연산 기호로만 이루어진 5자 이하의 줄
    4. keyboard: 키보드 잔상 토큰이거나 완성되지 않은 자모만으로 구성
    5. ui_chrome: UI 문자열이거나, 순수 한글 단어가 아닌 3자 이하의 줄
    """

    def __init__(self, config: NoiseFilterConfig):
        self.config = config
        self._keyboard_tokens = frozenset(config.keyboard_tokens)
        self._chrome_tokens = frozenset(config.ui_chrome_tokens)
        self._rules: list[tuple[str, Callable[[str], bool]]] = [
            ("time", is_time_line),
            ("url", self._is_url),
            ("numeric", self._is_numeric_noise),
            ("keyboard", self._is_keyboard_artifact),
            ("ui_chrome", self._is_ui_chrome),
        ]

    # ------------------------------------------------------------------
    # 규칙
    # ------------------------------------------------------------------

    @staticmethod
    def _is_url(text: str) -> bool:
        return any(marker in text for marker in _URL_MARKERS)

    def _is_numeric_noise(self, text: str) -> bool:
        return (
            _NUMERIC_NOISE.fullmatch(text) is not None
            and len(text) <= self.config.numeric_max_length
        )

    def _is_keyboard_artifact(self, text: str) -> bool:
        return text in self._keyboard_tokens or _BARE_JAMO.fullmatch(text) is not None

    def _is_ui_chrome(self, text: str) -> bool:
        # "네"처럼 짧아도 완성형 한글 단어는 남긴다
        too_short = (
            len(text) <= self.config.short_line_max_length
            and _HANGUL_WORD.fullmatch(text) is None
        )
        return text in self._chrome_tokens or too_short

    # ------------------------------------------------------------------
    # 판정
    # ------------------------------------------------------------------

    def check(self, line: RawLine) -> FilterResult:
        """단일 줄을 판정합니다. 통과 여부와 처음 일치한 규칙 이름을 반환합니다."""
        text = line.text.strip()
        for name, rule in self._rules:
            if rule(text):
                return FilterResult(passed=False, reason=name)
        return FilterResult(passed=True)

    def is_valid_content(self, line: RawLine) -> bool:
        """모든 규칙을 통과하고 최소 길이를 넘는 줄이면 True."""
        text = line.text.strip()
        return len(text) > self.config.short_line_max_length and self.check(line).passed

    def filter(self, lines: Sequence[RawLine]) -> list[RawLine]:
        """노이즈 줄을 제거한 목록을 입력 순서대로 반환합니다.

        예외
        ------
        ValueError
            *lines*가 None이면 발생합니다.
        """
        if lines is None:
            raise ValueError("lines must be a sequence of RawLine, not None")

        kept: list[RawLine] = []
        reason_counts: dict[str, int] = {}
        for line in lines:
            result = self.check(line)
            if result.passed:
                kept.append(line)
                continue
            logger.debug("Dropped %s line: %r", result.reason, line.text)
            reason_counts[result.reason] = reason_counts.get(result.reason, 0) + 1

        total = len(lines)
        logger.info("Noise filter: %d/%d lines kept", len(kept), total)
        for reason, count in sorted(reason_counts.items(), key=lambda x: -x[1]):
            logger.debug("  Drop reason: %s (%d)", reason, count)
        return kept
