"""설정 시스템(config.py)의 단위 테스트입니다."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from chat_recon.config import (
    AttributionConfig,
    ClassifierConfig,
    LoggingConfig,
    NoiseFilterConfig,
    ReconConfig,
    ScoringConfig,
    TranscriptConfig,
    create_default_config,
    load_config,
)


# ---------------------------------------------------------------------------
# 개별 Config 클래스 기본값 검증
# ---------------------------------------------------------------------------


class TestNoiseFilterConfig:

    def test_기본값(self):
        cfg = NoiseFilterConfig()
        assert cfg.numeric_max_length == 5
        assert cfg.short_line_max_length == 3
        assert "메시지 입력" in cfg.ui_chrome_tokens
        assert "Pass" in cfg.keyboard_tokens

    def test_음수_길이_거부(self):
        with pytest.raises(ValidationError):
            NoiseFilterConfig(numeric_max_length=-1)


class TestAttributionConfig:

    def test_기본값(self):
        cfg = AttributionConfig()
        assert (cfg.position_weight, cfg.lexical_weight, cfg.time_weight) == (3, 2, 1)
        assert (cfg.left_threshold, cfg.right_threshold) == (0.3, 0.7)
        assert cfg.screen_width is None
        assert "엄마" in cfg.kinship_nouns

    @pytest.mark.parametrize("left, right", [(0.7, 0.3), (0.0, 0.7), (0.3, 1.0), (0.5, 0.5)])
    def test_잘못된_위치_기준_거부(self, left, right):
        with pytest.raises(ValidationError):
            AttributionConfig(left_threshold=left, right_threshold=right)

    def test_음수_가중치_거부(self):
        with pytest.raises(ValidationError):
            AttributionConfig(time_weight=-1)

    def test_0_이하_화면_너비_거부(self):
        with pytest.raises(ValidationError):
            AttributionConfig(screen_width=0)


class TestTranscriptConfig:

    def test_기본값(self):
        cfg = TranscriptConfig()
        assert cfg.self_label == "나"
        assert cfg.counterpart_label == "상대방"

    def test_중복_라벨_거부(self):
        with pytest.raises(ValidationError):
            TranscriptConfig(counterpart_label="나")

    @pytest.mark.parametrize("label", ["a]b", "줄\n바꿈"])
    def test_구분자_포함_라벨_거부(self, label):
        with pytest.raises(ValidationError):
            TranscriptConfig(system_label=label)

    def test_빈_라벨_거부(self):
        with pytest.raises(ValidationError):
            TranscriptConfig(unknown_label="")


class TestClassifierConfig:

    def test_기본값(self):
        cfg = ClassifierConfig()
        assert cfg.max_keywords == 5
        assert "에서" in cfg.stopwords

    def test_음수_키워드_수_거부(self):
        with pytest.raises(ValidationError):
            ClassifierConfig(max_keywords=-1)


class TestScoringConfig:

    def test_기본값(self):
        cfg = ScoringConfig()
        assert cfg.base == 0.5
        assert cfg.position_bonus == 0.3
        assert cfg.default_ocr_confidence == 0.5

    def test_범위_밖_기본값_거부(self):
        with pytest.raises(ValidationError):
            ScoringConfig(base=1.5)

    def test_길이_기준_순서_거부(self):
        with pytest.raises(ValidationError):
            ScoringConfig(short_text_chars=60, long_text_chars=50)


# ---------------------------------------------------------------------------
# ReconConfig
# ---------------------------------------------------------------------------


class TestReconConfig:

    def test_기본_섹션(self):
        cfg = ReconConfig()
        assert isinstance(cfg.noise, NoiseFilterConfig)
        assert isinstance(cfg.logging, LoggingConfig)
        assert cfg.logging.level == "INFO"

    def test_None_섹션은_기본값(self):
        cfg = ReconConfig.model_validate({"attribution": None, "scoring": None})
        assert cfg.attribution.position_weight == 3
        assert cfg.scoring.base == 0.5

    def test_딕셔너리_섹션(self, make_config):
        cfg = make_config(attribution={"screen_width": 720})
        assert cfg.attribution.screen_width == 720

    def test_화면_너비_추정은_기본적으로_꺼짐(self, default_config):
        assert default_config.attribution.infer_screen_width is False


# ---------------------------------------------------------------------------
# load_config / create_default_config
# ---------------------------------------------------------------------------


class TestLoadConfig:

    def test_yaml_로드(self, tmp_yaml_config):
        cfg = load_config(tmp_yaml_config)
        assert cfg.attribution.screen_width == 1080
        assert cfg.attribution.lexical_weight == 4
        assert cfg.attribution.position_weight == 3
        assert cfg.transcript.counterpart_label == "상대"
        assert cfg.logging.level == "DEBUG"

    def test_문자열_경로(self, tmp_yaml_config):
        assert load_config(str(tmp_yaml_config)).attribution.screen_width == 1080

    def test_없는_파일(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_빈_파일은_기본값(self, tmp_path):
        f = tmp_path / "empty.yaml"
        f.write_text("", encoding="utf-8")
        assert load_config(f) == ReconConfig()

    def test_잘못된_yaml(self, tmp_path):
        f = tmp_path / "broken.yaml"
        f.write_text("attribution: [unclosed", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_config(f)

    def test_스키마_위반(self, tmp_path):
        f = tmp_path / "invalid.yaml"
        f.write_text("attribution:\n  left_threshold: 0.9\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(f)


class TestCreateDefaultConfig:

    def test_템플릿은_유효한_설정(self, tmp_path):
        content = create_default_config()
        f = tmp_path / "chat-recon.yaml"
        f.write_text(content, encoding="utf-8")
        assert load_config(f) == ReconConfig()

    def test_템플릿은_yaml(self):
        data = yaml.safe_load(create_default_config())
        assert set(data) >= {"noise", "attribution", "transcript", "scoring"}
