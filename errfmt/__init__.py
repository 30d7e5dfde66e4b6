"""
Errorformat: Normalize Linter Output for Text Editors

A Python library for compiling errorformat strings that describe the shape
of a tool's diagnostic lines, and extracting file, line, column, kind and
message from each line of its output.
"""

__version__ = "1.0.0"
__author__ = "Errorformat Maintainers"

from .models import Diagnostic, Literal, Placeholder, PlaceholderKind, Severity, Template
from .compiler import (
    CompileError,
    DuplicatePlaceholder,
    InvalidPlaceholder,
    TemplateCompiler,
    compile_template,
)
from .matcher import LineMatcher, match_line
from .serializer import KakouneSerializer
from .report import MatchReport
from .io_utils import JSONLWriter, JSONLReader

PASSTHROUGH_ERRFMT = "%f:%l:%c: %k: %m"

__all__ = [
    "Diagnostic",
    "Literal",
    "Placeholder",
    "PlaceholderKind",
    "Severity",
    "Template",
    "CompileError",
    "DuplicatePlaceholder",
    "InvalidPlaceholder",
    "TemplateCompiler",
    "compile_template",
    "LineMatcher",
    "match_line",
    "KakouneSerializer",
    "MatchReport",
    "JSONLWriter",
    "JSONLReader",
    "PASSTHROUGH_ERRFMT",
]
