"""Wall-clock budget for a single extraction call.

OCR dominates extraction cost and grows with page count and resolution, so
each call gets a budget of ``base + per_page * pages`` seconds, capped at a
hard maximum. Page loops poll ``expired()`` between pages and stop early,
keeping whatever pages already finished. Tesseract calls receive
``remaining()`` as their subprocess timeout.

Stages of one call run one at a time, so a single instance is shared by
them without locking.
"""

from __future__ import annotations

import time


class Deadline:
    """Per-call time budget that grows once the page count is known."""

    def __init__(self, base_seconds: float, per_page_seconds: float, max_seconds: float):
        self._started = time.monotonic()
        self._base = base_seconds
        self._per_page = per_page_seconds
        self._max = max_seconds
        self._budget = min(base_seconds, max_seconds)

    @classmethod
    def from_settings(cls, settings) -> Deadline:
        return cls(
            settings.deadline_base_seconds,
            settings.deadline_per_page_seconds,
            settings.deadline_max_seconds,
        )

    def allow_pages(self, page_count: int) -> None:
        """Extend the budget for a document of *page_count* pages.

        Only ever grows the budget, so calling it once per pass over the same
        document is harmless.
        """
        wanted = self._base + self._per_page * max(page_count, 0)
        self._budget = max(self._budget, min(wanted, self._max))

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._started

    def remaining(self) -> float:
        return max(self._budget - self.elapsed, 0.0)

    def expired(self) -> bool:
        return self.elapsed >= self._budget
