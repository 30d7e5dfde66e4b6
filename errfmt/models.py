"""
Core data models for errorformat templates and extracted diagnostics.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union
from dataclasses_json import dataclass_json
from enum import Enum


class PlaceholderKind(Enum):
    """Placeholders recognized after a `%` in an errorformat string."""
    FILE = "f"
    LINE = "l"
    COLUMN = "c"
    KIND = "k"
    MESSAGE = "m"

    @property
    def is_numeric(self) -> bool:
        return self in (PlaceholderKind.LINE, PlaceholderKind.COLUMN)

    def __str__(self) -> str:
        return f"%{self.value}"


class Severity(Enum):
    """Diagnostic kinds understood by the editor."""
    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def from_kind(cls, kind: Optional[str]) -> 'Severity':
        """
        Normalize a captured kind such as "Warning", "WARN" or "PHP Warning".

        Anything that does not mention a warning is reported as an error.
        """
        words = re.findall(r"[a-z]+", kind.lower()) if kind else []
        if "warning" in words or "warn" in words:
            return cls.WARNING
        return cls.ERROR

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Literal:
    """Text matched verbatim."""
    text: str


@dataclass(frozen=True)
class Placeholder:
    """A capture slot for one diagnostic field."""
    kind: PlaceholderKind


Segment = Union[Literal, Placeholder]


@dataclass(frozen=True)
class Template:
    """A compiled errorformat string: an ordered sequence of segments."""
    source: str
    segments: Tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def placeholders(self) -> Tuple[PlaceholderKind, ...]:
        return tuple(s.kind for s in self.segments if isinstance(s, Placeholder))

    def has(self, kind: PlaceholderKind) -> bool:
        return kind in self.placeholders

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.source


@dataclass_json
@dataclass
class Diagnostic:
    """A structured record extracted from one matching input line."""
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    kind: Optional[str] = None
    message: str = ""

    @property
    def severity(self) -> Severity:
        return Severity.from_kind(self.kind)

    def __str__(self) -> str:
        return (f"Diagnostic(file={self.file!r}, line={self.line}, "
                f"column={self.column}, kind={self.kind!r}, "
                f"message={self.message!r})")
