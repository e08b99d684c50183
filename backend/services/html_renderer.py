"""
HTML Renderer - Two-column comparison table for a diff script
"""

from __future__ import annotations

import html
from collections.abc import Sequence

from models.diff import DiffLine, DiffTag

COLOR_HEADER_BG = "#f8f9fa"
COLOR_EMPTY_BG = "#f8f9fa"
COLOR_DELETE_BG = "#f8d7da"
COLOR_INSERT_BG = "#d4edda"
COLOR_REPLACE_BG = "#fff3cd"
COLOR_LINE_NUM = "#6c757d"

# (left cell class, right cell class) per operation
CELL_CLASSES: dict[DiffTag, tuple[str, str]] = {
    DiffTag.EQUAL: ("", ""),
    DiffTag.DELETE: ("diff-delete", "diff-empty"),
    DiffTag.INSERT: ("diff-empty", "diff-insert"),
    DiffTag.REPLACE: ("diff-replace", "diff-replace"),
}

CLASS_COLORS = {
    "": "",
    "diff-empty": COLOR_EMPTY_BG,
    "diff-delete": COLOR_DELETE_BG,
    "diff-insert": COLOR_INSERT_BG,
    "diff-replace": COLOR_REPLACE_BG,
}


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` for embedding in markup"""
    return html.escape(text, quote=True)


def _cell_attrs(css_class: str, base_style: str) -> str:
    color = CLASS_COLORS[css_class]
    style = base_style + (f" background-color: {color};" if color else "")
    class_attr = f' class="{css_class}"' if css_class else ""
    return f'{class_attr} style="{style}"'


def render_row(line: DiffLine) -> str:
    """Render one diff operation as a table row"""
    left_class, right_class = CELL_CLASSES[line.tag]

    left_num = str(line.left_line_num) if line.left_line_num is not None else ""
    right_num = str(line.right_line_num) if line.right_line_num is not None else ""
    left_content = escape_html(line.left_line) if line.left_line else "&nbsp;"
    right_content = escape_html(line.right_line) if line.right_line else "&nbsp;"

    num_style = f"text-align: right; color: {COLOR_LINE_NUM};"
    text_style = "white-space: pre-wrap;"

    return (
        f'<tr data-tag="{line.tag.value}">'
        f"<td{_cell_attrs(left_class, num_style)}>{left_num}</td>"
        f"<td{_cell_attrs(left_class, text_style)}>{left_content}</td>"
        f"<td{_cell_attrs(right_class, num_style)}>{right_num}</td>"
        f"<td{_cell_attrs(right_class, text_style)}>{right_content}</td>"
        "</tr>\n"
    )


def render_diff_table(lines: Sequence[DiffLine], left_name: str, right_name: str) -> str:
    """Render a full comparison table with escaped file names as headers"""
    header_style = f"background-color: {COLOR_HEADER_BG};"
    parts = [
        '<table class="table table-sm table-bordered diff-table" '
        'style="font-family: monospace; font-size: 0.875rem;">\n',
        "<thead>\n<tr>",
        f'<th style="width: 50px; {header_style}">#</th>',
        f'<th style="width: 50%; {header_style}">{escape_html(left_name)}</th>',
        f'<th style="width: 50px; {header_style}">#</th>',
        f'<th style="width: 50%; {header_style}">{escape_html(right_name)}</th>',
        "</tr>\n</thead>\n<tbody>\n",
    ]
    parts.extend(render_row(line) for line in lines)
    parts.append("</tbody>\n</table>\n")
    return "".join(parts)
