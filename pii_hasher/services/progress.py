from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Percent progress display with tqdm (TTY only).

ProgressTracker is used directly as the processor's ``on_progress`` callback.
In non-TTY environments (CI, pipes) no bar is drawn, to avoid ANSI control
sequence spam in captured output.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Percent based progress bar for one file.

    Calling the tracker with a percent advances the bar by the difference to
    the last value seen; lower values than already shown are ignored.
    """

    def __init__(self, description: str = "Hashing") -> None:
        self.description = description
        self.percent = 0
        self.history: list[int] = []

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=100,
                desc=description,
                unit="%",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def __call__(self, percent: int) -> None:
        self.history.append(percent)
        if percent <= self.percent:
            return
        delta = percent - self.percent
        self.percent = percent
        if self.enabled and self.pbar is not None:
            self.pbar.update(delta)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
