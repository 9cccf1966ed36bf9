"""Positioned text runs and the join strategies that turn them into text.

A ``TextRun`` is one fragment of a page's text layer with its origin in PDF
user space (y grows upward). Different PDF producers write content streams
in very different orders, so each page's runs are joined several ways and
the longest result is kept.
"""

from __future__ import annotations

from dataclasses import dataclass

from doctext.extractor.types import ExtractionCandidate


@dataclass(frozen=True)
class TextRun:
    text: str
    x: float
    y: float


def _non_blank(runs: list[TextRun]) -> list[TextRun]:
    return [run for run in runs if run.text and run.text.strip()]


def plain_join(runs: list[TextRun]) -> str:
    """Non-blank runs in encounter order, single-space separated."""
    return " ".join(run.text for run in _non_blank(runs))


def raw_join(runs: list[TextRun], separator: str = " ") -> str:
    """Every non-empty run, no reordering or blank filtering."""
    return separator.join(run.text for run in runs if run.text)


def group_lines(runs: list[TextRun], tolerance: float) -> list[list[TextRun]]:
    """Cluster runs into lines, top of page first, each line left to right.

    Runs are visited from the highest y downward; a run joins the current
    line while its y is within *tolerance* of the line's first run.
    """
    lines: list[list[TextRun]] = []
    anchor_y: float | None = None
    for run in sorted(runs, key=lambda r: (-r.y, r.x)):
        if anchor_y is None or abs(anchor_y - run.y) > tolerance:
            lines.append([])
            anchor_y = run.y
        lines[-1].append(run)
    return [sorted(line, key=lambda r: r.x) for line in lines]


def position_sorted_join(runs: list[TextRun], tolerance: float = 5.0) -> str:
    """Non-blank runs in reading order recovered from their coordinates."""
    lines = group_lines(_non_blank(runs), tolerance)
    return " ".join(run.text for line in lines for run in line)


def run_candidates(
    runs: list[TextRun],
    label: str,
    tolerance: float = 5.0,
) -> list[ExtractionCandidate]:
    """The three primary-pass candidates for one set of runs.

    Order matters: on equal length the plain join wins.
    """
    return [
        ExtractionCandidate.of(plain_join(runs), f"{label}:plain"),
        ExtractionCandidate.of(position_sorted_join(runs, tolerance), f"{label}:position"),
        ExtractionCandidate.of(raw_join(runs), f"{label}:raw"),
    ]
