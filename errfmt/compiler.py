"""
Errorformat template compiler.

Turns a format string such as ``%k: %m in %f on line %l`` into a Template:
an ordered sequence of Literal and Placeholder segments.
"""

from collections import Counter
from typing import List

from .models import Literal, Placeholder, PlaceholderKind, Segment, Template


ESCAPE = "%"


class CompileError(ValueError):
    """Base class for errors raised while compiling an errorformat string."""

    def __init__(self, errfmt: str, message: str):
        self.errfmt = errfmt
        super().__init__(f"{message} in errorformat {errfmt!r}")


class InvalidPlaceholder(CompileError):
    """A `%` followed by an unknown character, or by nothing at all."""

    def __init__(self, errfmt: str, position: int):
        self.position = position
        self.char = errfmt[position + 1] if position + 1 < len(errfmt) else None
        if self.char is None:
            message = f"dangling '%' at position {position}"
        else:
            message = f"unknown placeholder '%{self.char}' at position {position}"
        super().__init__(errfmt, message)


class DuplicatePlaceholder(CompileError):
    """A placeholder kind used more than once."""

    def __init__(self, errfmt: str, kind: PlaceholderKind, count: int):
        self.kind = kind
        self.count = count
        super().__init__(errfmt, f"placeholder '{kind}' used {count} times")


class TemplateCompiler:
    """
    Compiles errorformat strings into Templates.

    Recognized placeholders are ``%f`` (file), ``%l`` (line), ``%c`` (column),
    ``%k`` (kind) and ``%m`` (message); ``%%`` stands for a literal percent sign.
    """

    def __init__(self):
        self.placeholders = {kind.value: kind for kind in PlaceholderKind}

    def tokenize(self, errfmt: str) -> List[str]:
        """
        Split an errorformat string into raw tokens.

        Literal runs are kept whole, while every ``%x`` pair becomes its own
        token, e.g. ``"foo: %fhello %m"`` -> ``["foo: ", "%f", "hello ", "%m"]``.

        Raises:
            InvalidPlaceholder: on a trailing `%` or an unknown letter
        """
        tokens = []
        current = []
        i = 0

        while i < len(errfmt):
            char = errfmt[i]
            if char != ESCAPE:
                current.append(char)
                i += 1
                continue

            if i + 1 >= len(errfmt):
                raise InvalidPlaceholder(errfmt, i)

            follower = errfmt[i + 1]
            if follower != ESCAPE and follower not in self.placeholders:
                raise InvalidPlaceholder(errfmt, i)

            if current:
                tokens.append("".join(current))
                current = []
            tokens.append(char + follower)
            i += 2

        if current:
            tokens.append("".join(current))

        return tokens

    def compile(self, errfmt: str) -> Template:
        """
        Compile an errorformat string.

        Args:
            errfmt: The format string describing one diagnostic line

        Returns:
            The compiled, immutable Template

        Raises:
            InvalidPlaceholder: on a trailing `%` or an unknown letter
            DuplicatePlaceholder: when a placeholder kind appears twice
        """
        segments: List[Segment] = []
        literal = []

        for token in self.tokenize(errfmt):
            if token == ESCAPE + ESCAPE:
                # %% only ever extends the surrounding literal
                literal.append(ESCAPE)
            elif token.startswith(ESCAPE):
                if literal:
                    segments.append(Literal("".join(literal)))
                    literal = []
                segments.append(Placeholder(self.placeholders[token[1]]))
            else:
                literal.append(token)

        if literal:
            segments.append(Literal("".join(literal)))

        self._validate(errfmt, segments)
        return Template(source=errfmt, segments=tuple(segments))

    def _validate(self, errfmt: str, segments: List[Segment]) -> None:
        """Reject templates that use any placeholder more than once."""
        counts = Counter(s.kind for s in segments if isinstance(s, Placeholder))
        for kind in PlaceholderKind:
            if counts[kind] > 1:
                raise DuplicatePlaceholder(errfmt, kind, counts[kind])


def compile_template(errfmt: str) -> Template:
    """Compile an errorformat string with the default compiler."""
    return TemplateCompiler().compile(errfmt)
