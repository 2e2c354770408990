"""Pydantic v2 + YAML를 사용한 chat-recon 설정 시스템입니다.

YAML 파일에서 재구성 파이프라인 설정을 로드하고 검증합니다.
노이즈 필터, 화자 귀속, 대화록 라벨, 분류, 신뢰도 점수에 대한
타입 안전 접근을 제공합니다.
"""

from __future__ import annotations

import importlib.resources
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------------
# 하위 모델
# ---------------------------------------------------------------------------


class NoiseFilterConfig(BaseModel):
    """OCR 노이즈 제거 규칙입니다."""

    keyboard_tokens: list[str] = Field(default_factory=lambda: [
        "ㄷ", "ㅋ", "트", "초", "요", "이", "ㅠ", "L", "Pass",
    ])
    ui_chrome_tokens: list[str] = Field(default_factory=lambda: [
        "메시지 입력", "←", "→", "↑", "↓", "◀", "▶", "+", "!", "#", "Ut",
    ])
    numeric_max_length: int = 5
    short_line_max_length: int = 3

    @model_validator(mode="after")
    def _check_lengths(self) -> "NoiseFilterConfig":
        """길이 기준이 음수가 아닌지 검증합니다."""
        if self.numeric_max_length < 0 or self.short_line_max_length < 0:
            raise ValueError("길이 기준은 0 이상이어야 합니다")
        return self


class AttributionConfig(BaseModel):
    """화자 귀속 투표 가중치와 위치 기준입니다.

    화면 너비는 호출자가 전달한 값, 그다음 *screen_width*를 사용합니다. 둘 다
    없으면 위치 신호를 건너뛰며, *infer_screen_width*를 켜면 가장 넓은 박스의
    오른쪽 끝으로 추정합니다.
    """

    position_weight: int = 3
    lexical_weight: int = 2
    time_weight: int = 1
    left_threshold: float = 0.3
    right_threshold: float = 0.7
    screen_width: int | None = None
    infer_screen_width: bool = False
    named_max_length: int = 15
    kinship_nouns: list[str] = Field(default_factory=lambda: [
        "엄마", "아빠", "할머니", "할아버지", "언니", "누나", "형", "오빠",
        "친구", "동생", "선생님", "회장님", "과장님", "부장님",
    ])

    @model_validator(mode="after")
    def _check_thresholds(self) -> "AttributionConfig":
        """위치 기준 순서와 가중치 부호를 검증합니다."""
        if not (0.0 < self.left_threshold < self.right_threshold < 1.0):
            raise ValueError(
                f"left_threshold({self.left_threshold})와 right_threshold({self.right_threshold})는 "
                "0 < left < right < 1 이어야 합니다"
            )
        if min(self.position_weight, self.lexical_weight, self.time_weight) < 0:
            raise ValueError("투표 가중치는 0 이상이어야 합니다")
        if self.screen_width is not None and self.screen_width <= 0:
            raise ValueError(f"screen_width({self.screen_width})는 양수여야 합니다")
        return self


class TranscriptConfig(BaseModel):
    """평탄화된 대화록에 쓰는 화자 라벨입니다."""

    self_label: str = Field("나", min_length=1)
    counterpart_label: str = Field("상대방", min_length=1)
    system_label: str = Field("시스템", min_length=1)
    unknown_label: str = Field("미분류", min_length=1)

    @model_validator(mode="after")
    def _check_labels(self) -> "TranscriptConfig":
        """라벨이 서로 다르고 구분자 ']'를 포함하지 않는지 검증합니다."""
        labels = [self.self_label, self.counterpart_label, self.system_label, self.unknown_label]
        if len(set(labels)) != len(labels):
            raise ValueError(f"화자 라벨은 서로 달라야 합니다: {labels}")
        for label in labels:
            if "]" in label or "\n" in label:
                raise ValueError(f"라벨에 ']' 또는 줄바꿈을 쓸 수 없습니다: {label!r}")
        return self


class ClassifierConfig(BaseModel):
    """내용 분류 및 키워드 추출 설정입니다."""

    max_keywords: int = 5
    stopwords: list[str] = Field(default_factory=lambda: [
        "은", "는", "이", "가", "을", "를", "의", "에", "에서", "로", "으로", "와", "과",
        "도", "만", "부터", "까지", "한테", "에게", "께", "한테서", "에게서", "께서",
        "이랑", "랑", "이든", "든", "이든지", "든지", "이야", "야", "이에요", "에요",
        "입니다", "다", "어요", "아요", "지요", "죠", "네요", "어", "아", "지", "네",
        "고", "며", "면서", "으면서", "으니", "니", "으니까", "니까", "으므로", "므로",
        "어서", "아서", "으려고", "려고", "으려면", "려면", "으면", "면",
    ])

    @model_validator(mode="after")
    def _check_max_keywords(self) -> "ClassifierConfig":
        if self.max_keywords < 0:
            raise ValueError(f"max_keywords({self.max_keywords})는 0 이상이어야 합니다")
        return self


class ScoringConfig(BaseModel):
    """신뢰도 점수 조정값입니다."""

    base: float = 0.5
    position_bonus: float = 0.3
    long_text_bonus: float = 0.1
    short_text_penalty: float = 0.1
    time_bonus: float = 0.1
    long_text_chars: int = 50
    short_text_chars: int = 10
    default_ocr_confidence: float = 0.5

    @model_validator(mode="after")
    def _check_scoring(self) -> "ScoringConfig":
        """기준값 범위와 길이 기준 순서를 검증합니다."""
        for name in ("base", "default_ocr_confidence"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name}({value})는 0.0~1.0 범위여야 합니다")
        if self.short_text_chars > self.long_text_chars:
            raise ValueError(
                f"short_text_chars({self.short_text_chars})는 "
                f"long_text_chars({self.long_text_chars})보다 클 수 없습니다"
            )
        return self


class LoggingConfig(BaseModel):
    """로깅 설정입니다."""

    level: str = "INFO"


# ---------------------------------------------------------------------------
# 루트 설정
# ---------------------------------------------------------------------------


class ReconConfig(BaseModel):
    """chat-recon의 루트 설정 객체입니다.

    전체 ``chat-recon.yaml`` 스키마를 반영합니다. :func:`load_config`를 통해
    또는 딕셔너리/YAML에서 직접 인스턴스화됩니다.
    """

    noise: NoiseFilterConfig = Field(default_factory=NoiseFilterConfig)
    attribution: AttributionConfig = Field(default_factory=AttributionConfig)
    transcript: TranscriptConfig = Field(default_factory=TranscriptConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="before")
    @classmethod
    def _strip_none_sections(cls, values: dict[str, Any]) -> dict[str, Any]:
        """값이 ``None``인 최상위 키를 제거하여 기본값이 적용되도록 합니다."""
        if isinstance(values, dict):
            return {k: v for k, v in values.items() if v is not None}
        return values


# ---------------------------------------------------------------------------
# 공개 API
# ---------------------------------------------------------------------------

_TEMPLATE_NAME = "chat-recon.yaml"


def load_config(path: str | Path) -> ReconConfig:
    """YAML 설정 파일을 로드하고 검증합니다.

    매개변수
    ----------
    path:
        ``chat-recon.yaml`` 파일의 파일시스템 경로입니다.

    반환값
    -------
    ReconConfig
        완전히 검증된 설정 객체입니다.

    예외
    ------
    FileNotFoundError
        *path*가 존재하지 않으면 발생합니다.
    yaml.YAMLError
        파일이 유효한 YAML이 아니면 발생합니다.
    pydantic.ValidationError
        YAML 내용이 예상 스키마와 일치하지 않으면 발생합니다.
    """
    filepath = Path(path).resolve()
    if not filepath.is_file():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    raw = yaml.safe_load(filepath.read_text(encoding="utf-8")) or {}
    return ReconConfig.model_validate(raw)


def create_default_config() -> str:
    """기본 YAML 설정 템플릿을 문자열로 반환합니다.

    패키지와 함께 제공되는 ``templates/chat-recon.yaml``을 읽고,
    찾지 못하면 기본값을 YAML로 덤프합니다.
    """
    try:
        ref = importlib.resources.files("chat_recon").joinpath("templates").joinpath(_TEMPLATE_NAME)
        return ref.read_text(encoding="utf-8")
    except (FileNotFoundError, ModuleNotFoundError) as e:
        logging.getLogger("chat_recon.config").debug(
            "importlib.resources에서 템플릿 로드 실패: %s", e
        )

    return yaml.safe_dump(
        ReconConfig().model_dump(mode="json"), allow_unicode=True, sort_keys=False
    )
