"""Regex extractors for approximate structural facts in C-family source.

None of these understand the grammar. Declarations split in unusual ways,
templates and macro-generated code are missed or misreported; callers treat
the results as hints for ranking and summaries only.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from codectx.models import FunctionSignature, TypeDeclaration

INCLUDE_RE = re.compile(
    r'^[ \t]*(?:#[ \t]*(?:include|import)|import)[ \t]*["<]([^">\n]+)[">]',
    re.MULTILINE,
)

FUNCTION_RE = re.compile(
    r"^[ \t]*"
    r"(?:(?:static|inline|virtual|extern|constexpr|explicit|friend|const|unsigned|signed|long|short)[ \t]+)*"
    r"(?P<return>[A-Za-z_][\w:<>,]*(?:[ \t]*[*&]+)?)"
    r"[ \t]+[*&]*"
    r"(?P<name>~?[A-Za-z_][\w:~]*)"
    r"[ \t]*\((?P<params>[^()]*)\)"
    r"\s*(?:const\s*)?(?:noexcept\s*)?(?:override\s*)?(?:final\s*)?\{",
    re.MULTILINE,
)

TYPE_RE = re.compile(
    r"(?<!enum\s)\b(?:class|struct)[ \t]+"
    r"(?P<name>[A-Za-z_]\w*)[ \t]*(?:final[ \t]*)?"
    r"(?::(?P<bases>[^{;]*))?\{"
)

NAMESPACE_RE = re.compile(r"\bnamespace[ \t]+([A-Za-z_][\w:]*)\s*\{")

_PARAMETER_NAME_RE = re.compile(r"^(?P<type>.*?[\s*&])\s*[A-Za-z_]\w*\s*(?P<array>\[[^\]]*\])?$", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")

CONTROL_KEYWORDS = frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "case", "catch", "return",
        "sizeof", "new", "delete", "throw", "using", "typedef", "goto", "operator",
    }
)
ACCESS_SPECIFIERS = frozenset({"public", "protected", "private", "virtual"})


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split on ``separator`` outside of <>, () and [] nesting."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char in "<([":
            depth += 1
        elif char in ">)]" and depth > 0:
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def parameter_types(params: str) -> List[str]:
    """Best-effort parameter types from a raw parameter list."""
    params = _collapse(params)
    if not params or params == "void":
        return []

    types = []
    for param in split_top_level(params):
        param = param.split("=", 1)[0].strip()
        if param == "...":
            types.append(param)
            continue
        match = _PARAMETER_NAME_RE.match(param)
        if match:
            param_type = match.group("type").strip()
            if match.group("array"):
                param_type += "[]"
        else:
            param_type = param
        types.append(_collapse(param_type))
    return types


def extract_includes(text: str) -> List[str]:
    return [match.group(1).strip() for match in INCLUDE_RE.finditer(text)]


def extract_functions(text: str, path: Path) -> List[FunctionSignature]:
    functions = []
    for match in FUNCTION_RE.finditer(text):
        name = match.group("name")
        return_type = _collapse(match.group("return"))
        if name in CONTROL_KEYWORDS or return_type in CONTROL_KEYWORDS:
            continue
        functions.append(
            FunctionSignature(
                name=name,
                return_type=return_type,
                parameters=parameter_types(match.group("params")),
                file_path=path,
                line=_line_of(text, match.start("name")),
            )
        )
    return functions


def base_type_names(bases: str | None) -> List[str]:
    if not bases:
        return []
    names = []
    for base in split_top_level(_collapse(bases)):
        words = [word for word in base.split(" ") if word not in ACCESS_SPECIFIERS]
        if words:
            names.append(" ".join(words))
    return names


def extract_types(text: str, path: Path) -> List[TypeDeclaration]:
    return [
        TypeDeclaration(
            name=match.group("name"),
            base_types=base_type_names(match.group("bases")),
            file_path=path,
            line=_line_of(text, match.start("name")),
        )
        for match in TYPE_RE.finditer(text)
    ]


def extract_namespaces(text: str) -> List[str]:
    return [match.group(1) for match in NAMESPACE_RE.finditer(text)]
