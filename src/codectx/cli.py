"""Command line interface for codectx."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from codectx.analysis.relevance import RelevanceAnalyzer, format_relevance_info, meets_threshold
from codectx.config import AnalysisOptions, ContextOptions, ScanOptions
from codectx.context.builder import ContextBuilder
from codectx.errors import ContextBuildError
from codectx.index.indexer import summarize_index
from codectx.index.scanner import ProjectScanner
from codectx.utils.text import estimate_tokens


console = Console()
app = typer.Typer(help="codectx - assemble LLM prompt context from project files")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _print_plain(text: str) -> None:
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


@app.command()
def context(
    prompt: str = typer.Argument(..., help="Prompt text, may contain '@file <path>' directives"),
    root: Path = typer.Option(Path("."), "--root", help="Project root directory"),
    max_tokens: int = typer.Option(ContextOptions().max_context_size, "--max-tokens", help="Token budget per included file"),
    line_numbers: bool = typer.Option(True, "--line-numbers/--no-line-numbers", help="Prefix included lines with numbers"),
    smart: bool = typer.Option(False, "--smart", help="Summarize files with low relevance to the prompt"),
    threshold: float = typer.Option(AnalysisOptions().relevance_threshold, "--threshold", help="Relevance needed for full content"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", help="Glob of files that must not be included"),
    relevance_info: bool = typer.Option(False, "--relevance-info", help="Embed relevance diagnostics in the context"),
    explain: bool = typer.Option(False, "--explain", help="Show what happened to each directive"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the prompt with every file directive expanded."""
    _setup_logging(verbose)
    options = ContextOptions(
        max_context_size=max_tokens,
        include_line_numbers=line_numbers,
        exclude_patterns=tuple(exclude or ()),
        enable_intelligent_selection=smart,
        analysis=AnalysisOptions(relevance_threshold=threshold),
        show_relevance_info=relevance_info,
    )
    builder = ContextBuilder(root, options)

    try:
        result, reports = builder.assemble(prompt)
    except ContextBuildError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _print_plain(result)

    if not explain:
        return
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Reference")
    table.add_column("Outcome")
    table.add_column("Score")
    table.add_column("Tokens")
    for report in reports:
        score = f"{report.score:.2f}" if report.score is not None else "-"
        table.add_row(report.reference, report.outcome, score, str(report.tokens))
    console.print(table)
    console.print(f"Estimated prompt tokens: [bold]{estimate_tokens(result)}[/bold]")


@app.command()
def index(
    root: Path = typer.Argument(Path("."), help="Project root to scan", resolve_path=True),
    ext: Optional[List[str]] = typer.Option(None, "--ext", help="File extension to include (repeatable)"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", help="Glob to exclude (repeatable)"),
    ignore_file: bool = typer.Option(True, "--ignore-file/--no-ignore-file", help="Honor .gitignore rules"),
    parent_ignore_files: bool = typer.Option(False, "--parent-ignore-files", help="Also honor .gitignore files of parent directories"),
    recursive: bool = typer.Option(True, "--recursive/--no-recursive", help="Descend into subdirectories"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Scan a project and list the structure found in each file."""
    _setup_logging(verbose)
    defaults = ScanOptions()
    options = ScanOptions(
        include_extensions=tuple(ext) if ext else defaults.include_extensions,
        exclude_patterns=tuple(exclude) if exclude else defaults.exclude_patterns,
        respect_ignore_file=ignore_file,
        include_parent_ignore_files=parent_ignore_files,
        recursive=recursive,
    )

    if not root.is_dir():
        raise typer.BadParameter(f"Not a directory: {root}")

    console.print(f"Indexing [bold]{root}[/bold]...")
    project_index = ProjectScanner(options).build_index(root)
    if not project_index:
        console.print("[yellow]No source files found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("File")
    table.add_column("Functions")
    table.add_column("Types")
    table.add_column("Includes")
    for path in sorted(project_index):
        file_index = project_index[path]
        table.add_row(
            path.relative_to(root).as_posix(),
            str(len(file_index.functions)),
            str(len(file_index.types)),
            str(len(file_index.includes)),
        )
    console.print(table)

    stats = summarize_index(project_index)
    console.print(
        f"Files: {stats.files}, functions: {stats.functions}, "
        f"types: {stats.types}, includes: {stats.includes}, empty: {stats.empty}"
    )


@app.command()
def summarize(
    file: Path = typer.Argument(..., help="Source file to summarize", exists=True, dir_okay=False),
) -> None:
    """Print the structural summary used for low-relevance files."""
    _print_plain(RelevanceAnalyzer().summarize(file))


@app.command()
def relevance(
    prompt: str = typer.Argument(..., help="Prompt text"),
    file: Path = typer.Argument(..., help="Source file to score", exists=True, dir_okay=False),
    threshold: float = typer.Option(AnalysisOptions().relevance_threshold, "--threshold", help="Relevance needed for full content"),
) -> None:
    """Score how relevant a file is to a prompt."""
    options = AnalysisOptions(relevance_threshold=threshold)
    score = RelevanceAnalyzer(options).analyze(prompt, file)
    _print_plain(format_relevance_info(score, str(file)))
    if meets_threshold(score, options):
        console.print("[green]Decision: full content[/green]")
    else:
        console.print("[yellow]Decision: summary[/yellow]")


def main() -> None:
    app()
