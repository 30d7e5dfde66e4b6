"""
I/O utilities for reading tool output and writing diagnostics as JSONL.
"""

import json
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Union

import click

from .models import Diagnostic


def iter_lines(handle: IO[str]) -> Iterator[str]:
    """Yield lines from an open text handle without their terminators."""
    for line in handle:
        yield line.rstrip("\r\n")


def read_lines(file_path: str) -> List[str]:
    """Read every line of a file, terminators stripped."""
    with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
        return list(iter_lines(f))


class JSONLWriter:
    """
    Writer for JSONL (JSON Lines) format.

    Accepts either a path, which is opened and closed by the writer, or an
    already open text handle such as stdout, which is left open.
    """

    def __init__(self, target: Union[str, Path, IO[str]]):
        self.target = target
        self.file_handle = None
        self._owns_handle = not hasattr(target, 'write')

    def __enter__(self):
        if self._owns_handle:
            self.file_handle = open(Path(self.target), 'w', encoding='utf-8')
        else:
            self.file_handle = self.target
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.file_handle and self._owns_handle:
            self.file_handle.close()
        self.file_handle = None

    def write_diagnostic(self, diagnostic: Diagnostic) -> None:
        """Write a single diagnostic to the JSONL stream."""
        if not self.file_handle:
            raise ValueError("JSONLWriter not opened")

        json.dump(diagnostic.to_dict(), self.file_handle, ensure_ascii=False)
        self.file_handle.write('\n')

    def write_diagnostics(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Write multiple diagnostics to the JSONL stream."""
        for diagnostic in diagnostics:
            self.write_diagnostic(diagnostic)


class JSONLReader:
    """
    Reader for JSONL (JSON Lines) format.
    """

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)

    def read_diagnostics(self) -> List[Diagnostic]:
        """Read all diagnostics from the JSONL file."""
        return list(self)

    def __iter__(self) -> Iterator[Diagnostic]:
        """Iterate over diagnostics in the file, skipping malformed lines."""
        if not self.file_path.exists():
            return

        with open(self.file_path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    yield Diagnostic.from_dict(json.loads(line))
                except (json.JSONDecodeError, KeyError, TypeError) as e:
                    click.echo(f"Warning: Skipping invalid diagnostic at line {line_num}: {e}", err=True)
