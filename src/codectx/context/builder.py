"""Prompt context assembly from inline ``@file <path>`` directives."""

from __future__ import annotations

import logging
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from codectx.analysis.relevance import (
    RelevanceAnalyzer,
    format_relevance_info,
    meets_threshold,
)
from codectx.config import DIRECTIVE_MARKER, FORCE_FLAG, ContextOptions
from codectx.errors import ContextBuildError, FileReadError
from codectx.models import FileInclusion, RelevanceScore
from codectx.utils.files import matches_any, normalize_path, read_text, relative_posix
from codectx.utils.text import (
    ensure_trailing_newline,
    estimate_tokens,
    number_lines,
    split_lines,
)

LOGGER = logging.getLogger(__name__)

INCLUSION_PATTERN = re.compile(
    rf"{re.escape(DIRECTIVE_MARKER)}\s+(?P<path>\S+)(?P<force>[ \t]+{re.escape(FORCE_FLAG)}(?!\S))?"
)

LINES_PER_TOKEN_BUDGET = 50
MIN_KEPT_LINES = 2

OUTSIDE_PROJECT_MARKER = "// Error: File '{ref}' is outside project directory or access denied"
EXCLUDED_MARKER = "// Warning: File '{ref}' matches exclude pattern"
READ_ERROR_MARKER = "// Error reading file '{ref}': {error}"
SUMMARY_NOTICE = (
    "// Note: File summary shown instead of full content due to low relevance score.\n"
    "// Use " + DIRECTIVE_MARKER + " {ref} " + FORCE_FLAG + " to include full file if needed.\n"
)


@dataclass(slots=True)
class InclusionReport:
    """What happened to one directive during assembly."""

    reference: str
    outcome: str
    tokens: int = 0
    score: float | None = None
    detail: str = ""


def extract_file_inclusions(prompt: str) -> List[FileInclusion]:
    """Find every directive in ``prompt``, in prompt order."""
    return [
        FileInclusion(
            file_path=match.group("path"),
            start=match.start(),
            end=match.end(),
            full_match=match.group(0),
            force=match.group("force") is not None,
        )
        for match in INCLUSION_PATTERN.finditer(prompt)
    ]


def resolve_path(reference: str, project_root: Path) -> Path:
    """Join a reference to the project root and normalize it lexically."""
    root = Path(os.path.abspath(project_root))
    return normalize_path(root / reference)


def is_path_allowed(path: Path, project_root: Path) -> bool:
    """True when ``path`` is an existing regular file inside the project."""
    root = Path(os.path.abspath(project_root))
    if relative_posix(path, root) is None:
        return False
    try:
        real_path = Path(path).resolve()
        if relative_posix(real_path, root.resolve()) is None:
            return False
        return real_path.is_file()
    except (OSError, RuntimeError):
        return False


def should_exclude(path: Path, project_root: Path, patterns: Sequence[str]) -> bool:
    if not patterns:
        return False
    path = Path(path)
    relative = relative_posix(path, Path(os.path.abspath(project_root)))
    return matches_any([path.name, relative or "", path.as_posix()], patterns)


def format_file(content: str, label: str, options: ContextOptions) -> str:
    """Header followed by the file content, optionally line-numbered."""
    header = options.render_header(label)
    if options.include_line_numbers:
        return header + number_lines(split_lines(content))
    return header + ensure_trailing_newline(content)


def _render_lines(lines: Sequence[str], start: int, options: ContextOptions) -> str:
    if options.include_line_numbers:
        return number_lines(lines, start=start)
    return "".join(line + "\n" for line in lines)


def _truncated_block(lines: List[str], kept: int, label: str, options: ContextOptions) -> str:
    total = len(lines)
    head_count = kept // 2
    tail_count = kept - head_count
    tail_start = total - tail_count
    return (
        f"// File truncated: showing {kept} of {total} lines\n"
        + options.render_header(label)
        + _render_lines(lines[:head_count], 1, options)
        + f"// ... {total - kept} lines omitted ...\n"
        + _render_lines(lines[tail_start:], tail_start + 1, options)
    )


def truncate_content(content: str, label: str, options: ContextOptions) -> str:
    """Keep the head and tail of a file so it fits the token budget.

    About ``max_context_size / 50`` lines are kept; the rest is replaced by
    a single omission line.
    """
    formatted = format_file(content, label, options)
    lines = split_lines(content)
    kept = max(options.max_context_size // LINES_PER_TOKEN_BUDGET, MIN_KEPT_LINES)
    if kept >= len(lines):
        return formatted

    budget = estimate_tokens(formatted)
    while True:
        block = _truncated_block(lines, kept, label, options)
        if kept == 0 or estimate_tokens(block) < budget:
            return block
        kept -= 1


def _read(path: Path) -> str:
    try:
        return read_text(path)
    except OSError as exc:
        raise FileReadError(f"Cannot read file: {path}") from exc


class ContextBuilder:
    """Assembles prompts for one project root and one set of options."""

    def __init__(self, project_root: Path | str = ".", options: ContextOptions | None = None) -> None:
        self.options = options or ContextOptions()
        self.project_root = Path(os.path.abspath(project_root))
        self.analyzer = RelevanceAnalyzer(self.options.analysis)

    def build(self, prompt: str) -> str:
        return self.assemble(prompt)[0]

    def explain(self, prompt: str) -> List[InclusionReport]:
        return self.assemble(prompt)[1]

    def assemble(self, prompt: str) -> Tuple[str, List[InclusionReport]]:
        if not isinstance(prompt, str):
            raise ContextBuildError(f"Prompt must be text, got {type(prompt).__name__}")
        try:
            root_mode = self.project_root.stat().st_mode
        except OSError as exc:
            raise ContextBuildError(f"Cannot access project root: {self.project_root}") from exc
        if not stat.S_ISDIR(root_mode):
            raise ContextBuildError(f"Project root is not a directory: {self.project_root}")

        result = prompt
        reports: List[InclusionReport] = []
        inclusions = sorted(extract_file_inclusions(prompt), key=lambda inc: inc.start, reverse=True)
        for inclusion in inclusions:
            try:
                replacement, report = self._render(prompt, inclusion)
            except Exception as exc:
                LOGGER.warning("Failed to include %s: %s", inclusion.file_path, exc)
                replacement = READ_ERROR_MARKER.format(ref=inclusion.file_path, error=exc)
                report = InclusionReport(inclusion.file_path, "error", detail=str(exc))
            result = result[: inclusion.start] + replacement + result[inclusion.end :]
            reports.append(report)

        reports.reverse()
        return result, reports

    def _render(self, prompt: str, inclusion: FileInclusion) -> Tuple[str, InclusionReport]:
        reference = inclusion.file_path
        path = resolve_path(reference, self.project_root)

        if not is_path_allowed(path, self.project_root):
            LOGGER.warning("Rejected %s: outside project or not a file", reference)
            return (
                OUTSIDE_PROJECT_MARKER.format(ref=reference),
                InclusionReport(reference, "denied"),
            )

        if should_exclude(path, self.project_root, self.options.exclude_patterns):
            LOGGER.warning("Skipped %s: matches exclude pattern", reference)
            return EXCLUDED_MARKER.format(ref=reference), InclusionReport(reference, "excluded")

        label = relative_posix(path, self.project_root) or path.as_posix()
        score: RelevanceScore | None = None
        full = True
        if self.options.enable_intelligent_selection and not inclusion.force:
            score = self.analyzer.analyze(prompt, path)
            full = meets_threshold(score, self.options.analysis)

        if full:
            text, outcome = self._full_content(path, label)
        else:
            text = self.analyzer.summarize(path, label) + "\n" + SUMMARY_NOTICE.format(ref=reference)
            outcome = "summary"

        if score is not None and self.options.show_relevance_info:
            text = format_relevance_info(score, label) + "\n" + text

        LOGGER.debug("Included %s as %s", reference, outcome)
        return text, InclusionReport(
            reference,
            outcome,
            tokens=estimate_tokens(text),
            score=score.score if score is not None else None,
        )

    def _full_content(self, path: Path, label: str) -> Tuple[str, str]:
        content = _read(path)
        formatted = format_file(content, label, self.options)
        if self.options.truncate_large_files and estimate_tokens(formatted) > self.options.max_context_size:
            truncated = truncate_content(content, label, self.options)
            if truncated != formatted:
                return truncated, "truncated"
        return formatted, "full"


def build_context(
    prompt: str, project_root: Path | str = ".", options: ContextOptions | None = None
) -> str:
    """Replace every directive in ``prompt`` with the referenced file's content.

    Per-directive problems (path outside the project, excluded file, read
    failure) become inline comment markers. Only a missing project root or a
    non-text prompt raises ContextBuildError.
    """
    return ContextBuilder(project_root, options).build(prompt)


def inject_file_contents(
    prompt: str, project_root: Path | str = ".", options: ContextOptions | None = None
) -> str:
    """Like build_context but always inlines full file content."""
    options = (options or ContextOptions()).with_overrides(enable_intelligent_selection=False)
    return build_context(prompt, project_root, options)
