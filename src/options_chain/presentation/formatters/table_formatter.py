"""
Table formatting utilities for the options chain CLI.
"""

import shutil
from typing import Any, Dict, Iterable, List, Optional, Union
from enum import Enum

from ...data.validators.results import ValidationIssue


class TableStyle(Enum):
    """Table formatting styles."""
    SIMPLE = "simple"
    GRID = "grid"
    MARKDOWN = "markdown"


class TableAlignment(Enum):
    """Column alignment options."""
    LEFT = "left"
    RIGHT = "right"


class TableFormatter:
    """
    Table formatter with a few styles and per-column alignment.

    Columns wider than the terminal are shrunk proportionally and their
    cells truncated with ``truncate_symbol``.
    """

    def __init__(self,
                 style: TableStyle = TableStyle.GRID,
                 max_width: Optional[int] = None,
                 truncate_symbol: str = "…"):
        self.style = style
        self.max_width = max_width or shutil.get_terminal_size().columns
        self.truncate_symbol = truncate_symbol

        self.styles = {
            TableStyle.SIMPLE: {
                'horizontal': '-',
                'vertical': '|',
                'corner': '+',
                'header_separator': True,
                'border': False
            },
            TableStyle.GRID: {
                'horizontal': '─',
                'vertical': '│',
                'corner': '┼',
                'top_left': '┌',
                'top_right': '┐',
                'bottom_left': '└',
                'bottom_right': '┘',
                'header_separator': True,
                'border': True
            },
            TableStyle.MARKDOWN: {
                'horizontal': '-',
                'vertical': '|',
                'corner': '|',
                'header_separator': True,
                'border': True
            }
        }

    def print_table(self,
                    headers: List[str],
                    rows: List[List[Union[str, int, float]]],
                    title: Optional[str] = None,
                    alignments: Optional[List[TableAlignment]] = None):
        """
        Print formatted table to console.

        Args:
            headers: Column headers
            rows: Table rows
            title: Optional table title
            alignments: Column alignments, left by default
        """
        if not headers or not rows:
            print("No data to display")
            return

        rows = [[str(cell) for cell in row] for row in rows]
        column_widths = self._adjust_column_widths(self._calculate_column_widths(headers, rows))

        if alignments is None:
            alignments = [TableAlignment.LEFT] * len(headers)

        headers = [self._truncate_text(header, column_widths[i]) for i, header in enumerate(headers)]
        rows = [[self._truncate_text(cell, column_widths[j]) for j, cell in enumerate(row)] for row in rows]

        if title:
            self._print_title(title, sum(column_widths) + len(headers) - 1)

        if self.style == TableStyle.MARKDOWN:
            self._print_markdown_table(headers, rows)
        else:
            self._print_standard_table(headers, rows, alignments, column_widths)

    def print_issue_table(self, issues: Iterable[ValidationIssue], title: Optional[str] = None):
        """Print validation issues as path / kind / severity / message rows."""
        rows = [[issue.field, issue.kind.value, issue.severity.value, issue.message] for issue in issues]
        self.print_table(["Path", "Kind", "Severity", "Message"], rows, title=title)

    def print_summary_table(self, data: Dict[str, Any], title: str = "Summary"):
        """Print summary data as a two-column table."""
        rows = []
        for key, value in data.items():
            formatted_key = key.replace('_', ' ').title()
            if isinstance(value, bool):
                formatted_value = "✓" if value else "✗"
            elif isinstance(value, int):
                formatted_value = f"{value:,}"
            else:
                formatted_value = str(value)
            rows.append([formatted_key, formatted_value])

        self.print_table(
            ["Field", "Value"], rows, title=title,
            alignments=[TableAlignment.LEFT, TableAlignment.RIGHT]
        )

    def _calculate_column_widths(self, headers: List[str], rows: List[List[str]]) -> List[int]:
        widths = [len(header) for header in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(cell))
        return widths

    def _adjust_column_widths(self, widths: List[int]) -> List[int]:
        """Adjust column widths to fit terminal width."""
        style_info = self.styles[self.style]
        total_width = sum(widths) + len(widths) - 1
        if style_info.get('border', False):
            total_width += 2

        if total_width > self.max_width:
            available_width = self.max_width - (len(widths) - 1)
            if style_info.get('border', False):
                available_width -= 2

            total_content_width = sum(widths)
            if total_content_width > 0:
                ratio = available_width / total_content_width
                widths = [max(3, int(width * ratio)) for width in widths]

        return widths

    def _truncate_text(self, text: str, width: int) -> str:
        if len(text) <= width:
            return text
        if width <= len(self.truncate_symbol):
            return text[:width]
        return text[:width - len(self.truncate_symbol)] + self.truncate_symbol

    def _print_title(self, title: str, width: int):
        title = self._truncate_text(title, width)
        print(title.center(width))
        print('=' * width)

    def _print_standard_table(self,
                              headers: List[str],
                              rows: List[List[str]],
                              alignments: List[TableAlignment],
                              column_widths: List[int]):
        style_info = self.styles[self.style]

        if style_info.get('border', False):
            self._print_border_line(column_widths, 'top')

        self._print_row(headers, alignments, column_widths)

        if style_info.get('header_separator', False):
            self._print_separator_line(column_widths)

        for row in rows:
            padded_row = row + [''] * (len(headers) - len(row))
            self._print_row(padded_row, alignments, column_widths)

        if style_info.get('border', False):
            self._print_border_line(column_widths, 'bottom')

    def _print_markdown_table(self, headers: List[str], rows: List[List[str]]):
        print('| ' + ' | '.join(headers) + ' |')
        print('| ' + ' | '.join('---' for _ in headers) + ' |')
        for row in rows:
            padded_row = row + [''] * (len(headers) - len(row))
            # Pipes inside a cell would split it.
            print('| ' + ' | '.join(cell.replace('|', '\\|') for cell in padded_row) + ' |')

    def _print_row(self, row: List[str], alignments: List[TableAlignment], column_widths: List[int]):
        style_info = self.styles[self.style]
        vertical = style_info['vertical']
        aligned_cells = [
            self._align_text(cell, alignment, width)
            for cell, alignment, width in zip(row, alignments, column_widths)
        ]

        if style_info.get('border', False):
            print(vertical + vertical.join(aligned_cells) + vertical)
        else:
            print(vertical.join(aligned_cells))

    def _print_border_line(self, column_widths: List[int], position: str):
        style_info = self.styles[self.style]
        horizontal = style_info['horizontal']
        corner = style_info.get('corner', '+')

        if position == 'top':
            left_corner = style_info.get('top_left', corner)
            right_corner = style_info.get('top_right', corner)
        else:
            left_corner = style_info.get('bottom_left', corner)
            right_corner = style_info.get('bottom_right', corner)

        print(left_corner + corner.join(horizontal * width for width in column_widths) + right_corner)

    def _print_separator_line(self, column_widths: List[int]):
        style_info = self.styles[self.style]
        horizontal = style_info['horizontal']
        corner = style_info.get('corner', '+')
        line = corner.join(horizontal * width for width in column_widths)

        if style_info.get('border', False):
            vertical = style_info['vertical']
            line = vertical + line + vertical
        print(line)

    def _align_text(self, text: str, alignment: TableAlignment, width: int) -> str:
        if alignment == TableAlignment.RIGHT:
            return text.rjust(width)
        return text.ljust(width)
