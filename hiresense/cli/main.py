"""CLI interface for HireSense using Typer."""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..core.config.loader import load_config
from ..core.models.analysis import AnalysisResult
from ..core.models.candidate import Candidate
from ..core.orchestrator.pipeline import AnalysisOrchestrator
from ..core.storage.object_store import CandidateStore
from ..integrations.reasoning_client import build_reasoning_client
from ..observability.logger import configure_logging, get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="hiresense",
    help="HireSense - multi-source candidate credibility analysis",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Configure logging from config before any command runs."""
    configure_logging(load_config())


def _get_store() -> CandidateStore:
    """Get file-based candidate store from config."""
    config = load_config()
    base_dir = config.get("storage", {}).get("candidate_store_dir", "data/candidates")
    return CandidateStore(base_dir)


def _load_candidate(store: CandidateStore, candidate_id: str) -> Candidate:
    """Load a candidate or exit with an error message."""
    try:
        candidate = store.load_candidate(candidate_id)
    except ValueError as e:
        console.print(f"[red]! Error:[/red] {e}")
        raise typer.Exit(code=1)
    if candidate is None:
        console.print(f"[red]! Candidate not found:[/red] {candidate_id}")
        raise typer.Exit(code=1)
    return candidate


def _render_analysis(candidate: Candidate, result: AnalysisResult) -> None:
    colour = "green" if result.score >= 70 else "yellow" if result.score >= 50 else "red"
    console.print(f"\n[bold]{candidate.name}[/bold] [dim]({candidate.id})[/dim]")
    console.print(f"Credibility score: [{colour}]{result.score}/100[/]")
    console.print(result.summary)

    if result.sources:
        sources = Table(show_header=True, header_style="bold magenta", title="Sources")
        sources.add_column("Source", width=10)
        sources.add_column("Score", justify="right")
        sources.add_column("Summary")
        for analysis in result.sources:
            sources.add_row(str(analysis.source_type).upper(), str(analysis.score), analysis.summary)
        console.print(sources)

    if result.flags:
        flags = Table(show_header=True, header_style="bold magenta", title="Flags")
        flags.add_column("Kind", width=8)
        flags.add_column("Category")
        flags.add_column("Severity", justify="right")
        flags.add_column("Message")
        for flag in result.flags:
            style = "red" if flag.kind == "red" else "yellow"
            flags.add_row(f"[{style}]{flag.kind}[/]", flag.category, str(flag.severity), flag.message)
        console.print(flags)

    if result.suggested_questions:
        console.print("\n[bold]Suggested questions:[/bold]")
        for question in result.suggested_questions:
            console.print(f"  - {question}")


@app.command("import-candidate")
def import_candidate(
    file: Annotated[
        Path,
        typer.Option(
            "--file",
            "-f",
            help="Path to candidate JSON document",
            exists=True,
            file_okay=True,
            dir_okay=False,
        ),
    ],
):
    """Validate a candidate JSON document and add it to the store."""
    try:
        candidate = Candidate.model_validate_json(file.read_text(encoding="utf-8"))
    except (IOError, UnicodeDecodeError) as e:
        console.print(f"[red]! Error reading candidate file:[/red] {e}")
        raise typer.Exit(code=1)
    except ValidationError as e:
        console.print(f"[red]! Invalid candidate document:[/red]\n{e}")
        raise typer.Exit(code=1)

    try:
        _get_store().save_candidate(candidate)
    except ValueError as e:
        console.print(f"[red]! Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]Imported candidate[/green] {candidate.id}")


@app.command()
def analyze(
    candidate_id: Annotated[str, typer.Option("--candidate-id", "-c", help="Candidate identifier")],
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Path to save the analysis JSON"),
    ] = None,
):
    """Run the credibility analysis for a stored candidate."""
    store = _get_store()
    candidate = _load_candidate(store, candidate_id)

    config = load_config()
    try:
        client = build_reasoning_client(config)
    except ValueError as e:
        console.print(f"[red]! Error:[/red] {e}")
        raise typer.Exit(code=1)

    async def run_analysis() -> Candidate:
        async with client:
            orchestrator = AnalysisOrchestrator(client, store=store, config=config)
            return await orchestrator.analyze_applicant(candidate)

    console.print(f"\n[bold blue]Analyzing candidate:[/bold blue] {candidate_id}")
    updated = asyncio.run(run_analysis())
    _render_analysis(updated, updated.ai_data)

    if output_file:
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(json.dumps(updated.ai_data.to_record(), indent=2), encoding="utf-8")
            console.print(f"\n[green]Analysis saved to:[/green] {output_file}")
        except IOError as e:
            console.print(f"\n[red]! Error saving output:[/red] {e}")
            raise typer.Exit(code=1)


@app.command()
def show(
    candidate_id: Annotated[str, typer.Option("--candidate-id", "-c", help="Candidate identifier")],
):
    """Display the stored analysis of a candidate."""
    candidate = _load_candidate(_get_store(), candidate_id)
    if candidate.ai_data is None:
        console.print(f"[yellow]No analysis stored for candidate:[/yellow] {candidate_id}")
        return

    _render_analysis(candidate, candidate.ai_data)


@app.command("list")
def list_candidates():
    """List stored candidates with their latest score."""
    store = _get_store()
    ids = store.list_candidate_ids()
    if not ids:
        console.print("[yellow]No candidates stored[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Candidate ID")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    for candidate_id in ids:
        candidate = store.load_candidate(candidate_id)
        score = "N/A" if candidate.score is None else str(candidate.score)
        table.add_row(candidate.id, candidate.name, score)
    console.print(table)


@app.command()
def init_store():
    """Initialize the candidate store."""
    console.print("[bold blue]Initializing candidate store...[/bold blue]")
    store = _get_store()
    console.print("[green]Candidate store ready at[/green]", store.base_dir)


if __name__ == "__main__":
    app()
