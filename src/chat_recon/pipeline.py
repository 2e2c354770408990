"""파이프라인 오케스트레이터: 모든 단계를 순차적으로 연결합니다.

각 단계는 독립적으로 또는 전체 파이프라인의 일부로 실행될 수 있습니다.
단계 1~5는 파일 I/O 없이 메모리 안에서만 동작하며, 파일 입출력은
:meth:`Pipeline.run_file`과 :meth:`Pipeline.run_directory`에서만 일어납니다.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import ReconConfig
    from .models import AttributedLine, ClassificationResult, Message, RawLine

from .classifier import ContentClassifier
from .merger import SegmentMerger
from .models import ReconstructionResult
from .noise import NoiseFilter
from .scorer import ConfidenceScorer
from .speaker import SpeakerAttributor
from .transcript import SpeakerLabels, flatten
from .utils import get_logger

logger = get_logger("pipeline")


class Pipeline:
    """전체 chat-recon 재구성 파이프라인 오케스트레이터입니다.

    상태를 갖지 않으므로 서로 다른 스크린샷에 대해 동시에 호출해도 안전합니다.
    """

    def __init__(self, config: ReconConfig) -> None:
        self.config = config
        self.noise_filter = NoiseFilter(config.noise)
        self.attributor = SpeakerAttributor(
            config.attribution,
            short_line_max_length=config.noise.short_line_max_length,
        )
        self.merger = SegmentMerger()
        self.classifier = ContentClassifier(config.classifier)
        self.scorer = ConfidenceScorer(config.scoring)
        self.labels = SpeakerLabels.from_config(config.transcript)

    # ------------------------------------------------------------------
    # 단계 1: 노이즈 필터
    # ------------------------------------------------------------------

    def step_filter(self, lines: Sequence[RawLine]) -> list[RawLine]:
        """OCR 잡음 줄을 제거합니다."""
        return self.noise_filter.filter(lines)

    # ------------------------------------------------------------------
    # 단계 2: 화자 귀속
    # ------------------------------------------------------------------

    def step_attribute(
        self, lines: Sequence[RawLine], screen_width: float | None = None
    ) -> list[AttributedLine]:
        """남은 줄마다 화자를 귀속합니다."""
        return self.attributor.attribute_all(lines, screen_width)

    # ------------------------------------------------------------------
    # 단계 3: 메시지 병합
    # ------------------------------------------------------------------

    def step_merge(self, attributed: Sequence[AttributedLine]) -> list[Message]:
        """같은 화자의 연속된 줄을 메시지로 묶습니다."""
        return self.merger.merge(attributed)

    # ------------------------------------------------------------------
    # 단계 4: 내용 분류
    # ------------------------------------------------------------------

    def step_classify(
        self, messages: Sequence[Message], ocr_confidence: float
    ) -> ClassificationResult:
        """재구성된 전체 텍스트를 분류합니다."""
        text = "\n".join(message.text for message in messages)
        return self.classifier.classify(text, ocr_confidence=ocr_confidence)

    # ------------------------------------------------------------------
    # 단계 5: 신뢰도 점수
    # ------------------------------------------------------------------

    def step_score(self, messages: Sequence[Message]) -> list[Message]:
        """메시지별 화자 귀속 신뢰도를 채웁니다."""
        return self.scorer.score_all(messages)

    # ------------------------------------------------------------------
    # 전체 실행
    # ------------------------------------------------------------------

    def reconstruct(
        self,
        lines: Sequence[RawLine],
        screen_width: float | None = None,
    ) -> ReconstructionResult:
        """OCR 줄 목록에서 화자가 귀속된 대화를 재구성합니다.

        매개변수
        ----------
        lines:
            화면 위에서 아래 순서의 OCR 줄입니다.
        screen_width:
            바운딩 박스 좌표계의 화면 너비입니다. None이면 설정값을 쓰고,
            설정값도 없으면 위치 신호 없이 귀속합니다.

        반환값
        -------
        ReconstructionResult
            메시지, 분류 결과, 평탄화된 대화록입니다. 모든 줄이 노이즈이면
            빈 결과를 반환하며 오류로 취급하지 않습니다.

        예외
        ------
        ValueError
            *lines*가 None이면 발생합니다.
        """
        if lines is None:
            raise ValueError("lines must be a sequence of RawLine, not None")

        kept = self.step_filter(lines)
        width = self.attributor.resolve_screen_width(kept, screen_width)
        attributed = self.step_attribute(kept, width)
        messages = self.step_score(self.step_merge(attributed))
        classification = self.step_classify(
            messages, self.scorer.ocr_confidence(kept)
        )

        result = ReconstructionResult(
            messages=messages,
            classification=classification,
            transcript=flatten(messages, self.labels),
            dropped=len(lines) - len(kept),
            screen_width=width,
        )
        if result.is_empty:
            logger.warning("No messages reconstructed from %d lines", len(lines))
        return result

    # ------------------------------------------------------------------
    # 파일 입출력
    # ------------------------------------------------------------------

    def run_file(self, path: Path) -> ReconstructionResult:
        """OCR 덤프 파일 하나를 파싱하고 재구성합니다.

        예외
        ------
        ValueError
            지원하지 않는 형식이거나 덤프 내용이 올바르지 않으면 발생합니다.
        FileNotFoundError
            *path*가 존재하지 않으면 발생합니다.
        """
        from .parsers import registry

        doc = registry.parse_file(Path(path))
        logger.info("Reconstructing %s (%d lines)", doc.doc_id, len(doc.lines))
        return self.reconstruct(doc.lines, doc.screen_width)

    def run_directory(self, dir_path: Path, output_dir: Path) -> list[Path]:
        """디렉토리의 모든 OCR 덤프를 재구성하여 ``<stem>.recon.json``으로 저장합니다.

        반환값
        -------
        list[Path]
            저장된 결과 파일 경로입니다.
        """
        from .parsers import registry

        docs = registry.parse_directory(Path(dir_path))
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        saved: list[Path] = []
        for doc in docs:
            result = self.reconstruct(doc.lines, doc.screen_width)
            out_path = output_dir / f"{Path(doc.doc_id).stem}.recon.json"
            self.save_result(result, out_path, source=doc.doc_id)
            saved.append(out_path)

        logger.info("Reconstructed %d dumps into %s", len(saved), output_dir)
        return saved

    def result_to_dict(
        self, result: ReconstructionResult, source: str | None = None
    ) -> dict[str, Any]:
        """결과를 JSON 직렬화 가능한 딕셔너리로 변환합니다."""
        data: dict[str, Any] = {
            "messages": [
                {**message.to_dict(), "label": self.labels.label(message.speaker)}
                for message in result.messages
            ],
            "classification": result.classification.to_dict(),
            "transcript": result.transcript,
            "dropped": result.dropped,
            "screen_width": result.screen_width,
        }
        if source is not None:
            data["source"] = source
        return data

    def save_result(
        self,
        result: ReconstructionResult,
        path: Path,
        source: str | None = None,
    ) -> Path:
        """결과를 UTF-8 JSON 파일로 저장합니다."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(self.result_to_dict(result, source), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.debug("Saved reconstruction to %s", path)
        return path
