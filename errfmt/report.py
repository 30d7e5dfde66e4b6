"""
Statistics over a matching run.
"""

from collections import defaultdict
from typing import Dict

from .models import Diagnostic


class MatchReport:
    """
    Collects statistics from matching tool output against a template.
    """

    def __init__(self, max_unmatched_samples: int = 100):
        self.total_lines = 0
        self.matched_lines = 0
        self.kind_stats = defaultdict(int)
        self.file_stats = defaultdict(int)
        self.unmatched_samples = []
        self.max_unmatched_samples = max_unmatched_samples

    def add_match(self, diagnostic: Diagnostic):
        """Record a successful match."""
        self.total_lines += 1
        self.matched_lines += 1
        self.kind_stats[str(diagnostic.severity)] += 1
        if diagnostic.file:
            self.file_stats[diagnostic.file] += 1

    def add_no_match(self, line: str):
        """Record a line that did not fit the template."""
        self.total_lines += 1

        if len(self.unmatched_samples) < self.max_unmatched_samples:
            self.unmatched_samples.append(line[:200])  # Truncate long lines

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        match_rate = (self.matched_lines / self.total_lines * 100) if self.total_lines > 0 else 0

        return {
            'total_lines': self.total_lines,
            'matched_lines': self.matched_lines,
            'unmatched_lines': self.total_lines - self.matched_lines,
            'match_rate': match_rate,
            'kind_distribution': dict(self.kind_stats),
            'top_files': sorted(self.file_stats.items(), key=lambda x: x[1], reverse=True)[:10],
            'unmatched_samples': self.unmatched_samples[:20]
        }
