"""휴리스틱 화자 귀속."""

from .attributor import SpeakerAttributor
from .ownership import NamedSpeakerDetector, classify_ownership
from .signals import lexical_vote, position_vote, screen_zone, time_vote

__all__ = [
    "SpeakerAttributor",
    "NamedSpeakerDetector",
    "classify_ownership",
    "lexical_vote",
    "position_vote",
    "screen_zone",
    "time_vote",
]
