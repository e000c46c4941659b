"""Render failure types."""

from __future__ import annotations

from collections.abc import Sequence


class RenderError(RuntimeError):
    """Base class for PDF rendering failures."""


class BrowserUnavailable(RenderError):
    """No acquisition strategy produced a usable browser executable."""

    def __init__(self, attempted: Sequence[str]):
        self.attempted = list(attempted)
        tried = "; ".join(self.attempted) or "none"
        super().__init__(f"No usable browser found (tried: {tried})")


class BrowserLaunchFailed(RenderError):
    """A browser executable was found but could not be started."""

    def __init__(self, strategy: str, message: str):
        self.strategy = strategy
        super().__init__(f"Browser launch failed via '{strategy}': {message}")


class RenderTimeout(RenderError):
    """A render step exceeded its time bound."""

    def __init__(self, step: str, timeout_s: float):
        self.step = step
        self.timeout_s = timeout_s
        super().__init__(f"Render step '{step}' timed out after {timeout_s:g}s")


class RasterizationFailed(RenderError):
    """The PDF print step failed or produced unusable bytes."""
