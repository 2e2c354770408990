"""chat-recon 테스트 스위트의 공유 fixture 정의."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# 팩토리 fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config():
    """ReconConfig 인스턴스를 쉽게 생성하는 팩토리 fixture입니다.

    사용법::
        cfg = make_config(attribution={"screen_width": 1080})
    """
    from chat_recon.config import ReconConfig

    def _factory(**overrides) -> ReconConfig:
        return ReconConfig(**overrides)

    return _factory


@pytest.fixture
def default_config(make_config):
    """기본 설정으로 생성된 ReconConfig를 반환합니다."""
    return make_config()


@pytest.fixture
def make_line():
    """RawLine 인스턴스를 쉽게 생성하는 팩토리 fixture입니다.

    *box*는 (left, top, right, bottom) 튜플입니다.

    사용법::
        line = make_line("안녕하세요", box=(700, 10, 1000, 40))
    """
    from chat_recon.models import BoundingBox, RawLine

    def _factory(
        text: str,
        box: tuple[int, int, int, int] | None = None,
        confidence: tuple[float, ...] = (),
    ) -> RawLine:
        bounding_box = BoundingBox(*box) if box is not None else None
        return RawLine(text=text, bounding_box=bounding_box, element_confidence=confidence)

    return _factory


@pytest.fixture
def left_line(make_line):
    """화면 너비 1000 기준 왼쪽 말풍선 줄을 만듭니다."""
    def _factory(text: str, top: int = 0) -> object:
        return make_line(text, box=(20, top, 220, top + 30))

    return _factory


@pytest.fixture
def right_line(make_line):
    """화면 너비 1000 기준 오른쪽 말풍선 줄을 만듭니다."""
    def _factory(text: str, top: int = 0) -> object:
        return make_line(text, box=(780, top, 980, top + 30))

    return _factory


@pytest.fixture
def make_message():
    """Message 인스턴스를 쉽게 생성하는 팩토리 fixture입니다."""
    from chat_recon.models import Message, Speaker

    def _factory(
        text: str = "밥 먹었어?",
        speaker: Speaker | None = None,
        attribution_confidence: float = 0.5,
        time_info: str | None = None,
    ) -> Message:
        return Message(
            speaker=speaker or Speaker.counterpart(),
            text=text,
            attribution_confidence=attribution_confidence,
            time_info=time_info,
        )

    return _factory


@pytest.fixture
def pipeline(default_config):
    """기본 설정의 Pipeline을 반환합니다."""
    from chat_recon.pipeline import Pipeline

    return Pipeline(default_config)


@pytest.fixture
def tmp_json_dump(tmp_path: Path) -> Path:
    """바운딩 박스가 있는 JSON OCR 덤프를 생성하여 경로를 반환합니다."""
    f = tmp_path / "Screenshot_20240115-154300.json"
    f.write_text(
        json.dumps(
            {
                "screen_width": 1000,
                "lines": [
                    {"text": "오후 4:43", "bounding_box": [450, 0, 550, 20]},
                    {"text": "주말에 시간 괜찮으세요", "bounding_box": [20, 40, 400, 70],
                     "element_confidence": [0.9, 0.8]},
                    {"text": "토요일 오후에 가능합니다", "bounding_box": [600, 90, 980, 120],
                     "element_confidence": [0.7]},
                    {"text": "메시지 입력", "bounding_box": [20, 900, 300, 940]},
                ],
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    return f


@pytest.fixture
def tmp_text_dump(tmp_path: Path) -> Path:
    """위치 정보 없는 텍스트 OCR 덤프를 생성하여 경로를 반환합니다."""
    f = tmp_path / "capture.txt"
    f.write_text("오후 4:43\n엄마\n밥 먹었어?\n\n아직\n", encoding="utf-8")
    return f


@pytest.fixture
def tmp_yaml_config(tmp_path: Path) -> Path:
    """일부 값만 바꾼 chat-recon.yaml 파일을 생성합니다."""
    f = tmp_path / "chat-recon.yaml"
    f.write_text(
        """\
attribution:
  screen_width: 1080
  lexical_weight: 4

transcript:
  counterpart_label: "상대"

logging:
  level: "DEBUG"
""",
        encoding="utf-8",
    )
    return f
