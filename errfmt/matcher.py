"""
Line matcher for compiled errorformat templates.

Aligns the literal segments of a Template against one input line and
captures the placeholder spans in between. Lines that do not fit the
template are an expected outcome and yield None rather than an error.
"""

from typing import Dict, Iterable, Iterator, Optional, Tuple

from .models import Diagnostic, Literal, Placeholder, PlaceholderKind, Template


DIGITS = frozenset("0123456789")
DIGIT_CHUNK = 1000

Captures = Dict[PlaceholderKind, str]


class LineMatcher:
    """
    Matches input lines against a compiled Template.

    Matching rules per placeholder:
      * %f / %k / %m as the last segment: the rest of the line, even if empty
      * %m elsewhere: greedy, ends at the last occurrence of the following
        literal if the rest of the template matches from there; otherwise
        it swallows the rest of the line
      * %l / %c: the longest run of ASCII digits, at least one (as the last
        segment the digits must reach the end of the line)
      * %f / %k: the shortest non-empty span followed by the next literal,
        or exactly one character when another placeholder follows directly
    """

    def __init__(self, template: Template):
        self.template = template
        self.segments = template.segments

    def match(self, line: str) -> Optional[Diagnostic]:
        """
        Match a single line.

        Args:
            line: One line of tool output, without its line terminator

        Returns:
            The extracted Diagnostic, or None if the line does not match
        """
        if not self.segments:
            return None

        captures = self._match_from(line, 0, 0, {})
        if captures is None:
            return None

        return self._build_diagnostic(captures)

    def match_lines(self, lines: Iterable[str]) -> Iterator[Tuple[int, Diagnostic]]:
        """Yield (line_number, diagnostic) for every matching line, in order."""
        for line_num, line in enumerate(lines, 1):
            diagnostic = self.match(line)
            if diagnostic is not None:
                yield line_num, diagnostic

    def _match_from(self, line: str, index: int, cursor: int,
                    captures: Captures) -> Optional[Captures]:
        """Match segments[index:] against line[cursor:]."""
        end = len(line)

        while index < len(self.segments):
            segment = self.segments[index]

            if isinstance(segment, Literal):
                if not line.startswith(segment.text, cursor):
                    return None
                cursor += len(segment.text)
                index += 1
                continue

            kind = segment.kind
            is_last = index == len(self.segments) - 1

            if kind.is_numeric:
                stop = cursor
                while stop < end and line[stop] in DIGITS:
                    stop += 1
            elif is_last:
                captures[kind] = line[cursor:]
                return captures
            elif kind is PlaceholderKind.MESSAGE:
                return self._match_message(line, index, cursor, captures)
            else:
                stop = self._lazy_stop(line, index, cursor)

            if stop is None or stop == cursor:
                return None

            captures[kind] = line[cursor:stop]
            cursor = stop
            index += 1

        if cursor != end:
            return None
        return captures

    def _match_message(self, line: str, index: int, cursor: int,
                       captures: Captures) -> Captures:
        """
        Capture %m greedily, leaving room for the segments after it.

        The message ends at the last occurrence of the literal that follows
        it, provided the rest of the template matches from there; otherwise
        it swallows the remainder of the line.
        """
        following = self.segments[index + 1]

        if isinstance(following, Literal):
            stop = line.rfind(following.text, cursor)
            if stop != -1:
                attempt = dict(captures)
                attempt[PlaceholderKind.MESSAGE] = line[cursor:stop]
                result = self._match_from(line, index + 1, stop, attempt)
                if result is not None:
                    return result

        captures[PlaceholderKind.MESSAGE] = line[cursor:]
        return captures

    def _lazy_stop(self, line: str, index: int, cursor: int) -> Optional[int]:
        """
        Find where a %f or %k capture ends.

        Returns the end of the shortest non-empty span that is directly
        followed by the next literal, or None if there is no such span.
        """
        following = self.segments[index + 1]

        if isinstance(following, Placeholder):
            # Adjacent placeholders cannot be told apart: take one character.
            return cursor + 1 if cursor < len(line) else None

        stop = line.find(following.text, cursor + 1)
        return stop if stop != -1 else None

    def _build_diagnostic(self, captures: Captures) -> Diagnostic:
        """Convert raw captures into a Diagnostic."""
        line = captures.get(PlaceholderKind.LINE)
        column = captures.get(PlaceholderKind.COLUMN)

        return Diagnostic(
            file=captures.get(PlaceholderKind.FILE),
            line=parse_digits(line) if line else None,
            column=parse_digits(column) if column else None,
            kind=captures.get(PlaceholderKind.KIND),
            message=captures.get(PlaceholderKind.MESSAGE, ""),
        )


def parse_digits(digits: str) -> int:
    """
    Convert a run of ASCII digits to an int of any length.

    int() refuses very long strings on recent interpreters, so the run is
    converted in chunks below that limit.
    """
    value = 0
    for start in range(0, len(digits), DIGIT_CHUNK):
        chunk = digits[start:start + DIGIT_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


def match_line(template: Template, line: str) -> Optional[Diagnostic]:
    """Match a single line against a template."""
    return LineMatcher(template).match(line)
