"""Tests for the comparison table renderer."""

import re

from models.diff import DiffLine, DiffTag
from services.diff_generator import compute_diff
from services.html_renderer import escape_html, render_diff_table, render_row


def cells(row_html):
    return re.findall(r"<td[^>]*>(.*?)</td>", row_html)


def cell_classes(row_html):
    return re.findall(r'<td(?: class="([^"]*)")?', row_html)


def test_escape_covers_markup_characters():
    assert escape_html("""<a href="x">&'</a>""") == "&lt;a href=&quot;x&quot;&gt;&amp;&#x27;&lt;/a&gt;"


def test_content_is_escaped():
    html = render_diff_table(compute_diff(["<b>"], ["<b>"]), "left", "right")
    assert "&lt;b&gt;" in html
    assert "<b>" not in html


def test_file_names_are_escaped():
    html = render_diff_table([], "<script>alert(1)</script>", "a&b.txt")
    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "a&amp;b.txt" in html


def test_equal_row_has_no_highlight():
    row = render_row(DiffLine(tag=DiffTag.EQUAL, left_line="x", right_line="x", left_line_num=1, right_line_num=1))
    assert cells(row) == ["1", "x", "1", "x"]
    assert "background-color" not in row
    assert "class=" not in row


def test_delete_row_highlights_left_and_blanks_right():
    row = render_row(DiffLine(tag=DiffTag.DELETE, left_line="gone", left_line_num=4))
    assert cells(row) == ["4", "gone", "", "&nbsp;"]
    assert cell_classes(row) == ["diff-delete", "diff-delete", "diff-empty", "diff-empty"]
    assert "#f8d7da" in row


def test_insert_row_highlights_right():
    row = render_row(DiffLine(tag=DiffTag.INSERT, right_line="new", right_line_num=2))
    assert cells(row) == ["", "&nbsp;", "2", "new"]
    assert cell_classes(row) == ["diff-empty", "diff-empty", "diff-insert", "diff-insert"]
    assert "#d4edda" in row


def test_replace_row_highlights_both_sides():
    row = render_row(DiffLine(tag=DiffTag.REPLACE, left_line="a", right_line="b", left_line_num=3, right_line_num=5))
    assert cells(row) == ["3", "a", "5", "b"]
    assert set(cell_classes(row)) == {"diff-replace"}
    assert row.count("#fff3cd") == 4


def test_empty_line_renders_non_breaking_space():
    row = render_row(DiffLine(tag=DiffTag.EQUAL, left_line="", right_line="", left_line_num=1, right_line_num=1))
    assert cells(row) == ["1", "&nbsp;", "1", "&nbsp;"]


def test_one_row_per_operation():
    lines = compute_diff(["a", "b", "c"], ["a", "c", "d"])
    html = render_diff_table(lines, "l", "r")
    assert html.count("<tr data-tag=") == len(lines)
    assert html.startswith("<table")
    assert html.rstrip().endswith("</table>")
