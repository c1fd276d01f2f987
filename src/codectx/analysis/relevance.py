"""Keyword-overlap relevance between a prompt and a source file.

The score blends three overlap ratios between prompt keywords and the terms
extracted from a file's structural index:

* exact - keyword equals a file term
* partial - keyword is contained in, or contains, a file term
* contains - keyword appears inside a file term, as a fraction of the
  keywords with three or more characters

``score = (exact + 0.7 * partial + 0.5 * contains) / 2.2`` clamped to [0, 1].
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from codectx.config import AnalysisOptions
from codectx.index.indexer import index_file
from codectx.models import FileIndex, KeywordMatch, RelevanceScore
from codectx.utils.text import normalize_keyword, split_identifier, split_words, unique

LOGGER = logging.getLogger(__name__)

EXACT_WEIGHT = 1.0
PARTIAL_WEIGHT = 0.7
CONTAINS_WEIGHT = 0.5
WEIGHT_TOTAL = EXACT_WEIGHT + PARTIAL_WEIGHT + CONTAINS_WEIGHT
CONTAINS_MIN_LENGTH = 3

MAX_LISTED_FUNCTIONS = 5
MAX_LISTED_TYPES = 3
MAX_LISTED_INCLUDES = 5


def extract_keywords(text: str, options: AnalysisOptions | None = None) -> List[str]:
    """Normalized, de-duplicated prompt keywords in first-seen order."""
    options = options or AnalysisOptions()
    keywords = []
    for word in split_words(text):
        normalized = normalize_keyword(word)
        if len(normalized) < options.min_keyword_length or normalized in options.stop_words:
            continue
        keywords.append(normalized)
    return list(unique(keywords))


def _identifier_terms(name: str, min_length: int) -> List[str]:
    words = [normalize_keyword(word) for word in split_identifier(name)]
    words.append(normalize_keyword(name))
    return [word for word in words if len(word) >= min_length]


def extract_terms(file_index: FileIndex, options: AnalysisOptions | None = None) -> List[str]:
    """Searchable terms from the enabled categories of a file index."""
    options = options or AnalysisOptions()
    names: List[str] = []
    if options.include_function_names:
        names.extend(function.name for function in file_index.functions)
    if options.include_type_names:
        names.extend(declaration.name for declaration in file_index.types)
    if options.include_includes:
        names.extend(file_index.includes)

    terms: List[str] = []
    for name in names:
        terms.extend(_identifier_terms(name, options.min_keyword_length))
    return list(unique(terms))


def _fraction(matches: int, total: int) -> float:
    return matches / total if total else 0.0


def exact_match_score(keywords: Sequence[str], terms: Sequence[str]) -> float:
    if not keywords or not terms:
        return 0.0
    term_set = set(terms)
    return _fraction(sum(1 for keyword in keywords if keyword in term_set), len(keywords))


def partial_match_score(keywords: Sequence[str], terms: Sequence[str]) -> float:
    if not keywords or not terms:
        return 0.0
    matches = sum(
        1 for keyword in keywords if any(term in keyword or keyword in term for term in terms)
    )
    return _fraction(matches, len(keywords))


def contains_match_score(keywords: Sequence[str], terms: Sequence[str]) -> float:
    eligible = [keyword for keyword in keywords if len(keyword) >= CONTAINS_MIN_LENGTH]
    if not eligible or not terms:
        return 0.0
    matches = sum(1 for keyword in eligible if any(keyword in term for term in terms))
    return _fraction(matches, len(eligible))


def keyword_match_score(keywords: Sequence[str], terms: Sequence[str]) -> float:
    if not keywords or not terms:
        return 0.0
    weighted = (
        exact_match_score(keywords, terms) * EXACT_WEIGHT
        + partial_match_score(keywords, terms) * PARTIAL_WEIGHT
        + contains_match_score(keywords, terms) * CONTAINS_WEIGHT
    )
    return min(max(weighted / WEIGHT_TOTAL, 0.0), 1.0)


def matched_keywords(keywords: Sequence[str], terms: Sequence[str]) -> List[KeywordMatch]:
    matches = []
    for keyword in keywords:
        for term in terms:
            if keyword == term:
                matches.append(KeywordMatch(keyword, term, "exact"))
            elif term in keyword or keyword in term:
                matches.append(KeywordMatch(keyword, term, "partial"))
    return matches


def describe_score(score: float) -> str:
    if score >= 0.8:
        return "High relevance: strong keyword matches found"
    if score >= 0.5:
        return "Medium relevance: some keyword matches found"
    if score >= 0.3:
        return "Low relevance: weak keyword matches found"
    return "No relevance: no significant keyword matches"


def score_index(prompt: str, file_index: FileIndex, options: AnalysisOptions | None = None) -> RelevanceScore:
    """Score an already built file index against a prompt."""
    options = options or AnalysisOptions()
    keywords = extract_keywords(prompt, options)
    if not keywords:
        return RelevanceScore(reason="No valid keywords found in prompt")

    terms = extract_terms(file_index, options)
    if not terms:
        return RelevanceScore(reason="No searchable terms found in file")

    score = keyword_match_score(keywords, terms)
    return RelevanceScore(
        score=score,
        reason=describe_score(score),
        matched_keywords=matched_keywords(keywords, terms),
    )


def analyze_relevance(
    prompt: str, file_path: Path, options: AnalysisOptions | None = None
) -> RelevanceScore:
    """Relevance of ``file_path`` to ``prompt``; never raises."""
    try:
        result = score_index(prompt, index_file(Path(file_path)), options)
    except Exception as exc:
        LOGGER.warning("Relevance analysis failed for %s: %s", file_path, exc)
        return RelevanceScore(score=0.0, reason=f"Error during analysis: {exc}")
    LOGGER.debug("Relevance of %s: %.2f (%s)", file_path, result.score, result.reason)
    return result


def meets_threshold(score: RelevanceScore, options: AnalysisOptions | None = None) -> bool:
    options = options or AnalysisOptions()
    return score.score >= options.relevance_threshold


def should_include_full(
    prompt: str, file_path: Path, options: AnalysisOptions | None = None
) -> bool:
    options = options or AnalysisOptions()
    return meets_threshold(analyze_relevance(prompt, file_path, options), options)


def _listing(label: str, names: Sequence[str], limit: int) -> str:
    line = f"// {label}: {len(names)} - " + ", ".join(names[:limit])
    if len(names) > limit:
        line += " ..."
    return line + "\n"


def render_summary(file_index: FileIndex, label: str | None = None) -> str:
    """Bounded human-readable digest of a file index.

    ``label`` replaces the file path in the first line, so callers can show a
    project-relative path.
    """
    lines = [f"// File: {label or file_index.path}\n"]
    if file_index.functions:
        names = [function.name for function in file_index.functions]
        lines.append(_listing("Functions", names, MAX_LISTED_FUNCTIONS))
    if file_index.types:
        names = [declaration.name for declaration in file_index.types]
        lines.append(_listing("Classes", names, MAX_LISTED_TYPES))
    if file_index.includes:
        lines.append(_listing("Key Includes", file_index.includes, MAX_LISTED_INCLUDES))
    lines.append(f"// Estimated content: {file_index.major_elements} major elements\n")
    return "".join(lines)


def summarize(file_path: Path, label: str | None = None) -> str:
    try:
        return render_summary(index_file(Path(file_path)), label)
    except Exception as exc:
        LOGGER.warning("Failed to summarize %s: %s", file_path, exc)
        return f"// Error generating summary for {label or file_path}: {exc}\n"


def format_relevance_info(score: RelevanceScore, label: str) -> str:
    lines = [
        f"// Relevance Analysis for: {label}\n",
        f"// Score: {score.score:.2f} - {score.reason}\n",
    ]
    if score.matched_keywords:
        lines.append("// Matched keywords: " + ", ".join(str(m) for m in score.matched_keywords) + "\n")
    return "".join(lines)


class RelevanceAnalyzer:
    """Relevance scoring bound to one set of analysis options."""

    def __init__(self, options: AnalysisOptions | None = None) -> None:
        self.options = options or AnalysisOptions()

    def analyze(self, prompt: str, file_path: Path) -> RelevanceScore:
        return analyze_relevance(prompt, file_path, self.options)

    def should_include_full(self, prompt: str, file_path: Path) -> bool:
        return meets_threshold(self.analyze(prompt, file_path), self.options)

    def summarize(self, file_path: Path, label: str | None = None) -> str:
        return summarize(file_path, label)
