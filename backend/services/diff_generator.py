"""
Diff Generator Service - Line-by-line comparison for side-by-side tables
"""

from __future__ import annotations

from collections.abc import Sequence

from models.diff import DiffLine, DiffSummary, DiffTag
from services.html_renderer import render_diff_table

# How many lines past the cursor are searched for a resync point
LOOKAHEAD = 3


class DiffGenerator:
    """Align two line sequences with a two-cursor scan.

    This is a greedy matcher, not a minimal edit script: short insert/delete
    runs (up to ``LOOKAHEAD`` lines) are recognized, longer ones degrade into
    a chain of ``replace`` operations.
    """

    @staticmethod
    def split_lines(text: str) -> list[str]:
        """Split on newlines only, keeping a trailing empty line"""
        return text.split("\n")

    def compute_diff(
        self,
        left_lines: Sequence[str],
        right_lines: Sequence[str],
    ) -> list[DiffLine]:
        """Classify every line of both inputs exactly once"""
        result: list[DiffLine] = []
        i = j = 0

        while i < len(left_lines) or j < len(right_lines):
            if i >= len(left_lines):
                result.append(self._insert(right_lines, j))
                j += 1
            elif j >= len(right_lines):
                result.append(self._delete(left_lines, i))
                i += 1
            elif left_lines[i] == right_lines[j]:
                result.append(
                    DiffLine(
                        tag=DiffTag.EQUAL,
                        left_line=left_lines[i],
                        right_line=right_lines[j],
                        left_line_num=i + 1,
                        right_line_num=j + 1,
                    )
                )
                i += 1
                j += 1
            else:
                tag = self._classify_mismatch(left_lines, right_lines, i, j)
                if tag is DiffTag.INSERT:
                    result.append(self._insert(right_lines, j))
                    j += 1
                elif tag is DiffTag.DELETE:
                    result.append(self._delete(left_lines, i))
                    i += 1
                else:
                    result.append(
                        DiffLine(
                            tag=DiffTag.REPLACE,
                            left_line=left_lines[i],
                            right_line=right_lines[j],
                            left_line_num=i + 1,
                            right_line_num=j + 1,
                        )
                    )
                    i += 1
                    j += 1

        return result

    def _classify_mismatch(
        self,
        left_lines: Sequence[str],
        right_lines: Sequence[str],
        i: int,
        j: int,
    ) -> DiffTag:
        """Decide how to consume a pair of differing lines.

        The right side is searched first, so an insert wins when both
        sides would resync within the window.
        """
        for k in range(j + 1, min(j + LOOKAHEAD + 1, len(right_lines))):
            if right_lines[k] == left_lines[i]:
                return DiffTag.INSERT

        for k in range(i + 1, min(i + LOOKAHEAD + 1, len(left_lines))):
            if left_lines[k] == right_lines[j]:
                return DiffTag.DELETE

        return DiffTag.REPLACE

    @staticmethod
    def _insert(right_lines: Sequence[str], j: int) -> DiffLine:
        return DiffLine(tag=DiffTag.INSERT, right_line=right_lines[j], right_line_num=j + 1)

    @staticmethod
    def _delete(left_lines: Sequence[str], i: int) -> DiffLine:
        return DiffLine(tag=DiffTag.DELETE, left_line=left_lines[i], left_line_num=i + 1)

    def generate_html_diff(
        self,
        text1: str,
        text2: str,
        filename1: str,
        filename2: str,
    ) -> str:
        """Split both texts, diff them and render the comparison table"""
        lines = self.compute_diff(self.split_lines(text1), self.split_lines(text2))
        return render_diff_table(lines, filename1, filename2)

    def summarize(self, lines: Sequence[DiffLine]) -> DiffSummary:
        """Count operations per tag"""
        counts = {tag.value: 0 for tag in DiffTag}
        for line in lines:
            counts[line.tag.value] += 1
        return DiffSummary(**counts)


def compute_diff(left_lines: Sequence[str], right_lines: Sequence[str]) -> list[DiffLine]:
    """Module-level shortcut for ``DiffGenerator().compute_diff``"""
    return DiffGenerator().compute_diff(left_lines, right_lines)
