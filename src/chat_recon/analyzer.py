"""재구성된 대화 통계 분석: 화자 귀속 결과의 품질을 수치로 보여줍니다."""

from __future__ import annotations

import json
import re
import statistics
from collections import Counter
from dataclasses import asdict, dataclass, field
from pathlib import Path
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ReconstructionResult

from .models import MessageKind, SpeakerKind
from .transcript import SpeakerLabels
from .utils import get_logger

logger = get_logger("analyzer")

# (종류, 표식) 순서대로 처음 일치한 종류를 사용
_KIND_MARKERS: list[tuple[MessageKind, tuple[str, ...]]] = [
    (MessageKind.IMAGE, ("사진", "이미지", "그림", "photo")),
    (MessageKind.FILE, ("파일", "첨부", "다운로드", "file")),
    (MessageKind.EMOJI, ()),
    (MessageKind.STICKER, ("스티커", "sticker")),
    (MessageKind.SYSTEM, ("입장", "퇴장", "초대", "알림")),
    (MessageKind.NOTIFICATION, ("알림", "notification")),
]
_EMOJI = re.compile("[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF]")

GROUP_CHAT_INDICATORS = (
    "님", "씨", "선생님", "여러분", "모두", "다들", "그룹", "단체", "팀", "회의", "모임",
)

_PARTICIPANT_PATTERNS = [
    re.compile(r"[가-힣]{2,4}(?:님|씨|선생님)"),
    re.compile(r"[A-Za-z]{2,10}(?:님|씨|선생님)"),
    re.compile(r"@[가-힣a-zA-Z0-9_]+"),
]
_HONORIFIC = re.compile(r"님|씨|선생님|@")


def analyze_message_kind(text: str) -> MessageKind:
    """메시지 본문의 형태(사진, 파일, 이모지 등)를 판정합니다."""
    lowered = text.lower()
    for kind, markers in _KIND_MARKERS:
        if kind is MessageKind.EMOJI:
            if _EMOJI.search(lowered):
                return kind
            continue
        if any(marker in lowered for marker in markers):
            return kind
    return MessageKind.TEXT


def detect_group_chat(text: str) -> bool:
    """호칭이나 단체 표현이 있으면 단체 대화로 봅니다."""
    return any(indicator in text for indicator in GROUP_CHAT_INDICATORS)


def extract_participants(text: str) -> list[str]:
    """호칭이 붙은 이름과 @멘션에서 참여자 이름을 중복 없이 추출합니다."""
    participants: list[str] = []
    for pattern in _PARTICIPANT_PATTERNS:
        for match in pattern.finditer(text):
            name = _HONORIFIC.sub("", match.group(0))
            if name and name not in participants:
                participants.append(name)
    return participants


@dataclass
class AnalysisReport:
    """재구성 결과 분석을 담는 보고서입니다."""
    total_messages: int = 0
    speaker_distribution: dict[str, int] = field(default_factory=dict)
    message_length_stats: dict[str, float] = field(default_factory=dict)
    confidence_stats: dict[str, float] = field(default_factory=dict)
    message_kind_distribution: dict[str, int] = field(default_factory=dict)
    is_group_chat: bool = False
    participants: list[str] = field(default_factory=list)
    override_conflicts: int = 0
    warnings: list[str] = field(default_factory=list)


class TranscriptAnalyzer:
    """재구성된 메시지의 통계를 분석하여 귀속 품질을 수치로 보고합니다.

    LLM 의존성이 없으며 순수 계산만 수행합니다.
    """

    low_confidence_threshold = 0.5
    unknown_ratio_threshold = 0.3

    def __init__(self, labels: SpeakerLabels | None = None):
        self.labels = labels or SpeakerLabels()

    def analyze(self, result: ReconstructionResult) -> AnalysisReport:
        """재구성 결과를 분석하여 AnalysisReport를 생성합니다."""
        report = AnalysisReport()
        messages = result.messages

        if not messages:
            report.warnings.append("재구성된 메시지가 없습니다.")
            return report

        report.total_messages = len(messages)

        # 화자 분포
        speakers = Counter(self.labels.label(m.speaker) for m in messages)
        report.speaker_distribution = dict(speakers.most_common())

        report.message_length_stats = self._compute_stats([len(m.text) for m in messages])
        report.confidence_stats = self._compute_stats(
            [m.attribution_confidence for m in messages], digits=2
        )

        kinds = Counter(analyze_message_kind(m.text).value for m in messages)
        report.message_kind_distribution = dict(kinds.most_common())

        full_text = "\n".join(m.text for m in messages)
        report.is_group_chat = detect_group_chat(full_text)
        report.participants = extract_participants(full_text)

        report.override_conflicts = sum(
            1 for m in messages for line in m.lines if line.signals.override_conflict
        )

        self._generate_warnings(report, result)
        return report

    def _compute_stats(self, values: Sequence[int | float], digits: int = 1) -> dict[str, float]:
        """수치 리스트에서 기초 통계를 계산합니다."""
        if not values:
            return {}
        return {
            "min": float(min(values)),
            "max": float(max(values)),
            "mean": round(statistics.mean(values), digits),
            "median": round(statistics.median(values), digits),
            "stdev": round(statistics.stdev(values), digits) if len(values) > 1 else 0.0,
        }

    def _generate_warnings(self, report: AnalysisReport, result: ReconstructionResult) -> None:
        """귀속 품질이 낮아 보이는 경우를 경고합니다."""
        mean_confidence = report.confidence_stats.get("mean", 1.0)
        if mean_confidence < self.low_confidence_threshold:
            report.warnings.append(
                f"평균 화자 귀속 신뢰도가 {mean_confidence}로 낮습니다. "
                "바운딩 박스나 화면 너비 정보가 빠졌는지 확인하세요."
            )

        unknown = sum(1 for m in result.messages if m.speaker.kind is SpeakerKind.UNKNOWN)
        if unknown / report.total_messages > self.unknown_ratio_threshold:
            report.warnings.append(
                f"화자를 판정하지 못한 메시지가 {unknown}개입니다 "
                f"(전체 {report.total_messages}개 중)."
            )

        if report.override_conflicts:
            report.warnings.append(
                f"소유권 문구가 위치 판정과 충돌한 줄이 {report.override_conflicts}개입니다."
            )

    def print_summary(self, report: AnalysisReport) -> None:
        """Rich 콘솔에 분석 요약을 출력합니다."""
        from rich.panel import Panel
        from rich.table import Table

        from .utils import console

        console.print(Panel("[bold cyan]대화 재구성 분석 보고서[/bold cyan]", expand=False))

        overview = Table(title="기본 통계", show_header=True)
        overview.add_column("항목", style="bold")
        overview.add_column("값", justify="right")
        overview.add_row("전체 메시지", str(report.total_messages))
        overview.add_row("단체 대화", "예" if report.is_group_chat else "아니오")
        overview.add_row("참여자", ", ".join(report.participants) or "-")
        overview.add_row("위치 충돌", str(report.override_conflicts))
        console.print(overview)

        if report.speaker_distribution:
            speaker_table = Table(title="화자 분포", show_header=True)
            speaker_table.add_column("화자", style="bold")
            speaker_table.add_column("개수", justify="right")
            speaker_table.add_column("비율", justify="right")
            for label, count in report.speaker_distribution.items():
                ratio = f"{count / report.total_messages * 100:.1f}%"
                speaker_table.add_row(label, str(count), ratio)
            console.print(speaker_table)

        if report.message_kind_distribution:
            kind_table = Table(title="메시지 형태", show_header=True)
            kind_table.add_column("형태", style="bold")
            kind_table.add_column("개수", justify="right")
            for kind, count in report.message_kind_distribution.items():
                kind_table.add_row(kind, str(count))
            console.print(kind_table)

        stats_table = Table(title="메시지 통계", show_header=True)
        stats_table.add_column("항목", style="bold")
        stats_table.add_column("최소", justify="right")
        stats_table.add_column("최대", justify="right")
        stats_table.add_column("평균", justify="right")
        stats_table.add_column("중앙값", justify="right")
        stats_table.add_column("표준편차", justify="right")
        for label, stats in [("길이 (문자 수)", report.message_length_stats),
                             ("귀속 신뢰도", report.confidence_stats)]:
            if stats:
                stats_table.add_row(
                    label,
                    f"{stats['min']:g}",
                    f"{stats['max']:g}",
                    str(stats["mean"]),
                    str(stats["median"]),
                    str(stats["stdev"]),
                )
        console.print(stats_table)

        if report.warnings:
            console.print()
            for warning in report.warnings:
                console.print(f"[yellow]⚠ {warning}[/yellow]")

    def save_report(self, report: AnalysisReport, path: Path) -> None:
        """분석 보고서를 JSON 파일로 저장합니다."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(asdict(report), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("분석 보고서를 %s에 저장했습니다.", path)
