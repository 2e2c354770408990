"""Rich를 사용한 구조화된 로깅 유틸리티."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()

_configured = False


def setup_logging(level: str = "INFO") -> logging.Logger:
    """루트 chat-recon 로거를 구성하고 반환합니다."""
    global _configured
    if not _configured:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        )
        _configured = True
    return logging.getLogger("chat_recon")


def get_logger(name: str) -> logging.Logger:
    """chat_recon 네임스페이스 아래의 자식 로거를 가져옵니다."""
    return logging.getLogger(f"chat_recon.{name}")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """*value*를 [low, high] 범위로 제한합니다."""
    return max(low, min(high, value))
