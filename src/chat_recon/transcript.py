"""``[라벨] 본문`` 형식의 평탄화된 대화록 인코딩/디코딩.

다른 앱 구성요소가 이 문자열을 다시 파싱하므로 형식은 바이트 단위로
유지됩니다. 메시지 본문의 두 번째 줄부터 ``[`` 또는 ``\\``로 시작하는 줄은
앞에 ``\\``를 붙여 새 메시지 머리글로 오인되지 않게 합니다.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import TranscriptConfig

from .errors import TranscriptFormatError
from .models import Message, Speaker, SpeakerKind
from .patterns import extract_time_info

_HEADER = re.compile(r"\[([^\]\n]+)\] (.*)")
_ESCAPE = "\\"


@dataclass(frozen=True)
class SpeakerLabels:
    """화자 역할과 표시 라벨 사이의 대응."""

    self_label: str = "나"
    counterpart_label: str = "상대방"
    system_label: str = "시스템"
    unknown_label: str = "미분류"

    @classmethod
    def from_config(cls, config: TranscriptConfig) -> SpeakerLabels:
        return cls(
            self_label=config.self_label,
            counterpart_label=config.counterpart_label,
            system_label=config.system_label,
            unknown_label=config.unknown_label,
        )

    def label(self, speaker: Speaker) -> str:
        if speaker.kind is SpeakerKind.NAMED_COUNTERPART and speaker.name:
            return speaker.name
        return {
            SpeakerKind.SELF: self.self_label,
            SpeakerKind.COUNTERPART: self.counterpart_label,
            SpeakerKind.NAMED_COUNTERPART: self.counterpart_label,
            SpeakerKind.SYSTEM: self.system_label,
            SpeakerKind.UNKNOWN: self.unknown_label,
        }[speaker.kind]

    def speaker(self, label: str) -> Speaker:
        """라벨을 역할로 되돌립니다. 예약 라벨이 아니면 이름 있는 상대방입니다."""
        reserved = {
            self.self_label: Speaker.self_(),
            self.counterpart_label: Speaker.counterpart(),
            self.system_label: Speaker.system(),
            self.unknown_label: Speaker.unknown(),
        }
        return reserved.get(label) or Speaker.named(label)


def _escape_body(text: str) -> str:
    first, *rest = text.split("\n")
    escaped = [
        _ESCAPE + line if line.startswith(("[", _ESCAPE)) else line
        for line in rest
    ]
    return "\n".join([first, *escaped])


def flatten(messages: Sequence[Message], labels: SpeakerLabels | None = None) -> str:
    """메시지를 ``[라벨] 본문`` 줄로 이어 붙입니다."""
    labels = labels or SpeakerLabels()
    return "\n".join(
        f"[{labels.label(message.speaker)}] {_escape_body(message.text)}"
        for message in messages
    )


def parse_flattened_transcript(
    text: str, labels: SpeakerLabels | None = None
) -> list[Message]:
    """:func:`flatten`의 역변환.

    예외
    ------
    TranscriptFormatError
        첫 메시지 머리글 앞에 내용이 있으면 발생합니다.
    """
    labels = labels or SpeakerLabels()
    if not text:
        return []

    entries: list[tuple[str, list[str]]] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        match = _HEADER.fullmatch(line)
        if match:
            entries.append((match.group(1), [match.group(2)]))
            continue
        if not entries:
            raise TranscriptFormatError(
                f"line {lineno}: expected '[label] text' header, got {line!r}"
            )
        if line.startswith(_ESCAPE):
            line = line[len(_ESCAPE):]
        entries[-1][1].append(line)

    messages: list[Message] = []
    for label, parts in entries:
        body = "\n".join(parts)
        messages.append(
            Message(
                speaker=labels.speaker(label),
                text=body,
                time_info=extract_time_info(body),
            )
        )
    return messages
