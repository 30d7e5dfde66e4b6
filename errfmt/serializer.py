"""
Renders diagnostics in kakoune's lint format.

Each diagnostic becomes one ``file:line:column: kind: message`` line, the
shape expected by the ``lint`` command of kakoune's standard rc scripts.
"""

from typing import Iterable, Optional

from .matcher import DIGIT_CHUNK
from .models import Diagnostic


DEFAULT_LINE = 1
DEFAULT_COLUMN = 1


class KakouneSerializer:
    """
    Serializer for kakoune lint lines.

    Missing line and column numbers default to 1 and a missing kind to
    ``error``. The file name falls back to ``default_file`` when the
    template did not capture one; with ``force_file`` it replaces any
    captured value, for linters that only ever see a temporary copy.
    """

    def __init__(self, default_file: Optional[str] = None, force_file: bool = False):
        self.default_file = default_file or ""
        self.force_file = force_file

    def resolve_file(self, diagnostic: Diagnostic) -> str:
        if self.force_file and self.default_file:
            return self.default_file
        return diagnostic.file or self.default_file

    def render(self, diagnostic: Diagnostic) -> str:
        """Render a single diagnostic."""
        line = diagnostic.line if diagnostic.line is not None else DEFAULT_LINE
        column = diagnostic.column if diagnostic.column is not None else DEFAULT_COLUMN

        return (f"{self.resolve_file(diagnostic)}:{format_number(line)}:{format_number(column)}: "
                f"{diagnostic.severity}: {diagnostic.message}")

    def render_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Render diagnostics as newline separated lines."""
        return "\n".join(self.render(d) for d in diagnostics)


def format_number(value: int) -> str:
    """Format a non-negative int of any size in decimal."""
    base = 10 ** DIGIT_CHUNK
    chunks = []
    while value >= base:
        value, low = divmod(value, base)
        chunks.append(str(low).zfill(DIGIT_CHUNK))
    chunks.append(str(value))
    return "".join(reversed(chunks))
