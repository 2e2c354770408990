"""여러 모듈에서 공유하는 핵심 데이터 모델."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# 열거형
# ---------------------------------------------------------------------------


class SpeakerKind(str, Enum):
    """화자 역할의 종류."""

    SELF = "self"
    COUNTERPART = "counterpart"
    NAMED_COUNTERPART = "named_counterpart"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ScreenZone(str, Enum):
    """바운딩 박스 중심이 놓인 화면 가로 영역."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextType(str, Enum):
    """재구성된 텍스트의 의미 분류."""

    QUESTION = "question"
    MESSAGE = "message"
    URL = "url"
    PHONE_NUMBER = "phone_number"
    EMAIL = "email"
    ADDRESS = "address"
    DATE_TIME = "date_time"
    NUMBER = "number"
    CODE = "code"
    GENERAL_TEXT = "general_text"


class Language(str, Enum):
    """문자 구성 기반 언어 판정."""

    KO = "ko"
    EN = "en"
    NUMBER = "number"
    MIXED = "mixed"


class EntityKind(str, Enum):
    """추출 엔티티의 종류."""

    PERSON = "person"
    LOCATION = "location"
    ORGANIZATION = "organization"
    MONEY = "money"
    PERCENT = "percent"
    TIME = "time"
    DATE = "date"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    HASHTAG = "hashtag"
    MENTION = "mention"


class MessageKind(str, Enum):
    """메시지 내용의 형태 (사진, 파일, 이모지 등)."""

    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    EMOJI = "emoji"
    STICKER = "sticker"
    SYSTEM = "system"
    NOTIFICATION = "notification"


# ---------------------------------------------------------------------------
# OCR 입력
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoundingBox:
    """화면 픽셀 좌표계의 축 정렬 사각형."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    def is_valid(self, screen_width: float | None = None) -> bool:
        """면적이 0 이하이거나 좌표가 화면 밖이면 False를 반환합니다."""
        if self.width <= 0 or self.height <= 0:
            return False
        if self.left < 0 or self.top < 0:
            return False
        if screen_width is not None and self.right > screen_width:
            return False
        return True


@dataclass(frozen=True)
class RawLine:
    """OCR 엔진이 인식한 한 줄의 텍스트입니다."""

    text: str
    """인식된 원문 텍스트입니다."""

    bounding_box: BoundingBox | None = None
    """줄의 화면 위치입니다 (엔진이 제공하지 않으면 None)."""

    element_confidence: tuple[float, ...] = ()
    """하위 토큰별 인식 신뢰도입니다."""


@dataclass
class OcrDocument:
    """OCR 덤프 파서의 구조화된 출력입니다."""

    doc_id: str
    """파일명 기반 고유 식별자입니다."""

    lines: list[RawLine] = field(default_factory=list)
    """화면 위에서 아래 순서의 인식 줄 목록입니다."""

    screen_width: int | None = None
    """바운딩 박스 좌표계의 화면 너비입니다."""

    metadata: dict = field(default_factory=dict)
    """임의의 메타데이터: 캡처 시각, 기기 정보 등입니다."""


# ---------------------------------------------------------------------------
# 화자 귀속
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Speaker:
    """화자 역할. NAMED_COUNTERPART일 때만 *name*을 가집니다."""

    kind: SpeakerKind
    name: str | None = None

    @classmethod
    def self_(cls) -> Speaker:
        return cls(SpeakerKind.SELF)

    @classmethod
    def counterpart(cls) -> Speaker:
        return cls(SpeakerKind.COUNTERPART)

    @classmethod
    def named(cls, name: str) -> Speaker:
        return cls(SpeakerKind.NAMED_COUNTERPART, name)

    @classmethod
    def system(cls) -> Speaker:
        return cls(SpeakerKind.SYSTEM)

    @classmethod
    def unknown(cls) -> Speaker:
        return cls(SpeakerKind.UNKNOWN)

    @property
    def is_counterpart(self) -> bool:
        return self.kind in (SpeakerKind.COUNTERPART, SpeakerKind.NAMED_COUNTERPART)

    @property
    def slot(self) -> SpeakerKind:
        """2인 대화 교대에서의 자리 (이름 있는 상대방도 상대방 자리)."""
        if self.kind is SpeakerKind.NAMED_COUNTERPART:
            return SpeakerKind.COUNTERPART
        return self.kind

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "name": self.name}


@dataclass(frozen=True)
class AttributionSignals:
    """한 줄에 대한 각 신호의 판정과 누적 투표표입니다."""

    zone: ScreenZone | None = None
    position: Speaker | None = None
    lexical: Speaker | None = None
    time: Speaker | None = None
    override: Speaker | None = None
    named: str | None = None
    fallback: bool = False
    votes: dict[SpeakerKind, int] = field(default_factory=dict)

    @property
    def override_conflict(self) -> bool:
        """소유권 패턴이 위치 신호와 반대 판정을 내렸으면 True."""
        return (
            self.override is not None
            and self.position is not None
            and self.override.slot != self.position.slot
        )

    def describe(self) -> str:
        """로그 및 진단용 한 줄 요약."""
        if self.named:
            return f"named:{self.named}"
        if self.override is not None:
            suffix = " (conflicts with position)" if self.override_conflict else ""
            return f"override:{self.override.kind.value}{suffix}"
        if self.fallback:
            return "alternation"
        parts = [f"{kind.value}={score}" for kind, score in self.votes.items()]
        return "votes:" + ",".join(parts)


@dataclass(frozen=True)
class AttributedLine:
    """화자가 귀속된 한 줄입니다."""

    line: RawLine
    text: str
    speaker: Speaker
    signals: AttributionSignals = field(default_factory=AttributionSignals)
    is_label: bool = False


@dataclass(frozen=True)
class Message:
    """같은 화자의 연속된 줄을 묶은 논리적 메시지입니다.

    동등성은 전송 형식이 운반하는 ``speaker``와 ``text``만 비교합니다.
    """

    speaker: Speaker
    text: str
    attribution_confidence: float = field(default=0.5, compare=False)
    time_info: str | None = field(default=None, compare=False)
    lines: tuple[AttributedLine, ...] = field(default=(), compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "speaker": self.speaker.to_dict(),
            "text": self.text,
            "attribution_confidence": self.attribution_confidence,
            "time_info": self.time_info,
        }


# ---------------------------------------------------------------------------
# 분류
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Entity:
    """텍스트에서 추출된 타입 있는 엔티티 (end_index는 배타적)."""

    text: str
    kind: EntityKind
    start_index: int
    end_index: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


@dataclass
class ClassificationResult:
    """재구성된 전체 텍스트의 분류 결과."""

    text_type: TextType = TextType.GENERAL_TEXT
    language: Language = Language.MIXED
    entities: list[Entity] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    ocr_confidence: float = 0.5

    def to_dict(self) -> dict[str, Any]:
        return {
            "text_type": self.text_type.value,
            "language": self.language.value,
            "entities": [e.to_dict() for e in self.entities],
            "keywords": list(self.keywords),
            "ocr_confidence": self.ocr_confidence,
        }


@dataclass
class ReconstructionResult:
    """한 스크린샷에 대한 파이프라인 전체 출력."""

    messages: list[Message] = field(default_factory=list)
    classification: ClassificationResult = field(default_factory=ClassificationResult)
    transcript: str = ""
    dropped: int = 0
    screen_width: float | None = None

    @property
    def is_empty(self) -> bool:
        """표시할 메시지가 없으면 True (오류가 아님)."""
        return not self.messages
