"""OCR 노이즈 필터."""

from .rules import FilterResult, NoiseFilter

__all__ = [
    "FilterResult",
    "NoiseFilter",
]
