"""Clock abstraction for testable expiry arithmetic.

Credential expiry decisions depend on an injected ``Clock`` rather than calling
``time.time()`` directly, so tests can move time forward deterministically.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Callable protocol returning *seconds* since the UNIX epoch."""

    def __call__(self) -> float: ...


def default_clock() -> float:
    """Default implementation that delegates to ``time.time()``."""
    return time.time()
