"""chat-recon: 메신저 스크린샷 OCR 결과에서 화자가 귀속된 대화를 재구성합니다."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    # 핵심
    "Pipeline",
    "ReconConfig",
    "load_config",
    # 데이터 모델
    "RawLine",
    "BoundingBox",
    "Speaker",
    "Message",
    "ClassificationResult",
    "ReconstructionResult",
    # 대화록
    "flatten",
    "parse_flattened_transcript",
    # 분석
    "TranscriptAnalyzer",
]


def __getattr__(name: str):
    """지연 임포트: 실제로 사용할 때만 하위 모듈을 로드합니다."""
    _imports: dict[str, tuple[str, str]] = {
        "Pipeline": (".pipeline", "Pipeline"),
        "ReconConfig": (".config", "ReconConfig"),
        "load_config": (".config", "load_config"),
        "RawLine": (".models", "RawLine"),
        "BoundingBox": (".models", "BoundingBox"),
        "Speaker": (".models", "Speaker"),
        "Message": (".models", "Message"),
        "ClassificationResult": (".models", "ClassificationResult"),
        "ReconstructionResult": (".models", "ReconstructionResult"),
        "flatten": (".transcript", "flatten"),
        "parse_flattened_transcript": (".transcript", "parse_flattened_transcript"),
        "TranscriptAnalyzer": (".analyzer", "TranscriptAnalyzer"),
    }

    if name in _imports:
        module_path, attr = _imports[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        globals()[name] = val  # 캐싱하여 다음 접근 시 __getattr__ 재호출 방지
        return val

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
