"""Per-request deadlines"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from app.core.exceptions import OperationCancelledError


@dataclass(frozen=True)
class Deadline:
    """Absolute point in monotonic time after which work must stop."""

    expires_at: float
    clock: Callable[[], float] = field(default=time.monotonic, compare=False)

    @classmethod
    def after(cls, seconds: float, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(expires_at=clock() + seconds, clock=clock)

    def expired(self) -> bool:
        return self.clock() >= self.expires_at

    def check(self) -> None:
        if self.expired():
            raise OperationCancelledError()


def check_deadline(deadline: Optional[Deadline]) -> None:
    """No-op when the caller supplied no deadline"""
    if deadline is not None:
        deadline.check()
