"""chat-recon 예외 정의."""

from __future__ import annotations


class TranscriptFormatError(ValueError):
    """평탄화된 대화록 문자열이 ``[라벨] 본문`` 형식이 아닐 때 발생합니다."""

    pass
