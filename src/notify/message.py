# src/notify/message.py — v1
"""Plain-text rendering of change reports."""

from __future__ import annotations

from treesum.scan.models import ChangeReport


def _format_list(items: list[str]) -> str:
    return "[" + " ".join(items) + "]"


def format_lines(report: ChangeReport) -> list[str]:
    """One line per non-empty section of the report."""
    lines: list[str] = []
    if not report.complete:
        lines.append("Scan incomplete (cancelled); results are partial.")
    if report.errors:
        lines.append(f"Errors: {_format_list(report.errors)}")
    if report.changed_files:
        lines.append(f"Changed files/folders: {_format_list(report.changed_files)}")
    if report.new_files:
        lines.append(f"New files/folders: {_format_list(report.new_files)}")
    if report.missing_files:
        lines.append(f"Missing files/folders: {_format_list(report.missing_files)}")
    return lines


def format_message(report: ChangeReport, title: str) -> str:
    """Render a chat message: title line followed by the report sections."""
    return "\n".join([title, *format_lines(report)]) + "\n"
