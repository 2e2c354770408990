"""화자가 귀속된 줄을 논리적 메시지로 병합합니다."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from .models import AttributedLine, Message, Speaker
from .patterns import extract_time_info
from .utils import get_logger

logger = get_logger("merger")


class SegmentMerger:
    """연속된 같은 화자의 줄을 하나의 메시지로 묶습니다."""

    def merge(self, attributed: Sequence[AttributedLine]) -> list[Message]:
        """귀속된 줄을 한 번 훑어 메시지 목록을 만듭니다.

        같은 화자의 줄은 줄바꿈으로 이어 붙이고, 화자가 바뀌면 버퍼를
        메시지로 내보냅니다. 마지막 버퍼는 무조건 내보냅니다. 이후 처음 발견된
        이름 있는 상대방으로 모든 상대방 메시지의 화자를 통일합니다.

        매개변수
        ----------
        attributed:
            :meth:`SpeakerAttributor.attribute_all`의 결과입니다.

        반환값
        -------
        list[Message]
            입력 순서를 유지한 메시지입니다. 모든 메시지의 본문은 비어 있지 않습니다.
        """
        messages: list[Message] = []
        current: Speaker | None = None
        buffer: list[AttributedLine] = []
        canonical_name: str | None = None

        for item in attributed:
            if canonical_name is None and item.speaker.name:
                canonical_name = item.speaker.name

            if item.speaker != current:
                self._flush(current, buffer, messages)
                current = item.speaker
                buffer = []
            buffer.append(item)

        self._flush(current, buffer, messages)

        if canonical_name is not None:
            messages = self._resolve_counterpart(messages, canonical_name)

        logger.info("Merged %d lines into %d messages", len(attributed), len(messages))
        return messages

    @staticmethod
    def _flush(
        speaker: Speaker | None,
        buffer: list[AttributedLine],
        messages: list[Message],
    ) -> None:
        # 이름만 있는 라벨 줄은 본문이 비어 메시지를 만들지 않는다
        bodies = [item.text for item in buffer if item.text]
        if speaker is None or not bodies:
            return
        text = "\n".join(bodies)
        messages.append(
            Message(
                speaker=speaker,
                text=text,
                time_info=extract_time_info(text),
                lines=tuple(buffer),
            )
        )

    @staticmethod
    def _resolve_counterpart(messages: list[Message], name: str) -> list[Message]:
        """모든 상대방 메시지를 *name*으로 바꾸고 인접한 같은 화자 메시지를 합칩니다."""
        canonical = Speaker.named(name)
        resolved: list[Message] = []
        for message in messages:
            if message.speaker.is_counterpart and message.speaker != canonical:
                message = replace(message, speaker=canonical)
            if resolved and resolved[-1].speaker == message.speaker:
                previous = resolved.pop()
                text = f"{previous.text}\n{message.text}"
                message = replace(
                    previous,
                    text=text,
                    time_info=extract_time_info(text),
                    lines=previous.lines + message.lines,
                )
            resolved.append(message)
        logger.debug("Resolved counterpart label to %r", name)
        return resolved
