"""chat-recon용 명령줄 인터페이스입니다."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.table import Table

from . import __version__
from .utils import console

if TYPE_CHECKING:
    from .config import ReconConfig
    from .models import ClassificationResult, ReconstructionResult
    from .pipeline import Pipeline

app = typer.Typer(
    name="chat-recon",
    help="Reconstruct speaker-attributed chat transcripts from messenger screenshot OCR.",
    no_args_is_help=True,
)

_DEFAULT_CONFIG = "chat-recon.yaml"


# ---------------------------------------------------------------------------
# 헬퍼
# ---------------------------------------------------------------------------


def _load_config(config_path: Optional[str]) -> ReconConfig:
    """설정을 로드합니다. 경로가 없으면 기본값을 사용합니다."""
    from .config import ReconConfig, load_config
    from .utils import setup_logging

    config = load_config(config_path) if config_path else ReconConfig()
    setup_logging(config.logging.level)
    return config


def _load_pipeline(config_path: Optional[str]) -> Pipeline:
    """설정을 로드하고 Pipeline 인스턴스를 반환합니다."""
    from .pipeline import Pipeline

    return Pipeline(_load_config(config_path))


def _print_transcript(pipeline: Pipeline, result: ReconstructionResult) -> None:
    table = Table(title="재구성된 대화", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("화자", style="bold cyan")
    table.add_column("메시지")
    table.add_column("신뢰도", justify="right")
    table.add_column("시각", style="dim")
    for index, message in enumerate(result.messages, start=1):
        table.add_row(
            str(index),
            pipeline.labels.label(message.speaker),
            message.text,
            f"{message.attribution_confidence:.2f}",
            message.time_info or "",
        )
    console.print(table)


def _print_classification(classification: ClassificationResult) -> None:
    table = Table(title="내용 분류", show_header=True)
    table.add_column("항목", style="bold")
    table.add_column("값")
    table.add_row("텍스트 타입", classification.text_type.value)
    table.add_row("언어", classification.language.value)
    table.add_row("키워드", ", ".join(classification.keywords) or "-")
    table.add_row("OCR 신뢰도", f"{classification.ocr_confidence:.2f}")
    console.print(table)

    if classification.entities:
        entity_table = Table(title="엔티티", show_header=True)
        entity_table.add_column("종류", style="bold")
        entity_table.add_column("텍스트")
        entity_table.add_column("위치", justify="right")
        for entity in classification.entities:
            entity_table.add_row(
                entity.kind.value, entity.text, f"{entity.start_index}-{entity.end_index}"
            )
        console.print(entity_table)


# ---------------------------------------------------------------------------
# 명령어
# ---------------------------------------------------------------------------


@app.command()
def init(
    path: str = typer.Option(".", "--path", help="Directory to write chat-recon.yaml into"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
) -> None:
    """기본 설정 파일(chat-recon.yaml)을 생성합니다."""
    from .config import create_default_config

    target_dir = Path(path)
    config_path = target_dir / _DEFAULT_CONFIG
    if config_path.exists() and not force:
        console.print(
            f"\n[bold red]오류:[/bold red] {config_path}가 이미 존재합니다 "
            "(덮어쓰려면 --force)"
        )
        raise typer.Exit(code=1)

    target_dir.mkdir(parents=True, exist_ok=True)
    config_path.write_text(create_default_config(), encoding="utf-8")

    console.print(f"\n[bold green]설정 파일 생성:[/bold green] {config_path}\n")
    console.print("[bold]다음 단계:[/bold]")
    console.print(f"  1. [cyan]{config_path}[/cyan]를 편집하여 라벨과 가중치 조정")
    console.print(
        f"  2. 실행: [cyan]chat-recon reconstruct capture.json --config {config_path}[/cyan]\n"
    )


@app.command()
def reconstruct(
    dump: Path = typer.Argument(..., help="OCR dump file (.json or .txt)"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to chat-recon.yaml"),
    screen_width: Optional[int] = typer.Option(
        None, "--screen-width", help="Screen width in bounding-box pixels"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result JSON here"),
    analyze: bool = typer.Option(False, "--analyze", help="Print an attribution quality report"),
) -> None:
    """OCR 덤프 하나에서 화자가 귀속된 대화를 재구성합니다."""
    try:
        from .parsers import registry

        pipeline = _load_pipeline(config)
        doc = registry.parse_file(dump)
        result = pipeline.reconstruct(doc.lines, screen_width or doc.screen_width)

        if result.is_empty:
            console.print("\n[yellow]재구성된 메시지가 없습니다 (모든 줄이 노이즈)[/yellow]\n")
        else:
            _print_transcript(pipeline, result)
        _print_classification(result.classification)

        if analyze:
            from .analyzer import TranscriptAnalyzer

            analyzer = TranscriptAnalyzer(pipeline.labels)
            analyzer.print_summary(analyzer.analyze(result))

        if output is not None:
            pipeline.save_result(result, output, source=doc.doc_id)
            console.print(f"\n[bold green]저장 완료:[/bold green] [cyan]{output}[/cyan]\n")

    except FileNotFoundError as e:
        console.print(f"\n[bold red]오류:[/bold red] {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"\n[bold red]재구성 실패:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command()
def batch(
    input_dir: Path = typer.Argument(..., help="Directory of OCR dumps"),
    output_dir: Path = typer.Option(Path("recon"), "--output", "-o", help="Output directory"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to chat-recon.yaml"),
) -> None:
    """디렉토리의 모든 OCR 덤프를 재구성하여 JSON으로 저장합니다."""
    try:
        if not input_dir.is_dir():
            raise FileNotFoundError(f"Directory not found: {input_dir}")

        pipeline = _load_pipeline(config)
        saved = pipeline.run_directory(input_dir, output_dir)

        console.print(
            f"\n[bold green]{len(saved)}개 덤프 재구성 완료[/bold green] → [cyan]{output_dir}[/cyan]\n"
        )

    except FileNotFoundError as e:
        console.print(f"\n[bold red]오류:[/bold red] {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"\n[bold red]일괄 처리 실패:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command(name="filter")
def filter_lines(
    dump: Path = typer.Argument(..., help="OCR dump file (.json or .txt)"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to chat-recon.yaml"),
) -> None:
    """노이즈 필터의 줄별 판정을 표시합니다."""
    try:
        from .noise import NoiseFilter
        from .parsers import registry

        noise_filter = NoiseFilter(_load_config(config).noise)
        doc = registry.parse_file(dump)

        table = Table(title=f"노이즈 판정: {doc.doc_id}", show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("텍스트")
        table.add_column("판정", style="bold")
        table.add_column("규칙")
        kept = 0
        for index, line in enumerate(doc.lines, start=1):
            verdict = noise_filter.check(line)
            kept += verdict.passed
            table.add_row(
                str(index),
                line.text,
                "[green]유지[/green]" if verdict.passed else "[red]제거[/red]",
                verdict.reason or "",
            )
        console.print(table)
        console.print(f"\n[bold]{kept}/{len(doc.lines)}[/bold]줄 유지\n")

    except FileNotFoundError as e:
        console.print(f"\n[bold red]오류:[/bold red] {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"\n[bold red]필터 실패:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command()
def classify(
    text: str = typer.Argument(..., help="Text to classify"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to chat-recon.yaml"),
) -> None:
    """텍스트의 타입, 언어, 엔티티, 키워드를 표시합니다."""
    try:
        from .classifier import ContentClassifier

        classifier = ContentClassifier(_load_config(config).classifier)
        _print_classification(classifier.classify(text))

    except FileNotFoundError as e:
        console.print(f"\n[bold red]오류:[/bold red] {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"\n[bold red]분류 실패:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """chat-recon 버전을 표시합니다."""
    console.print(f"chat-recon [bold]{__version__}[/bold]")


# ---------------------------------------------------------------------------
# 진입점
# ---------------------------------------------------------------------------


def main() -> None:
    """pyproject.toml에서 호출되는 진입점입니다."""
    app()
