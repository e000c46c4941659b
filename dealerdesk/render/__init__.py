"""HTML to PDF rendering on a shared headless browser."""

from dealerdesk.render.browsers import BrowserManager
from dealerdesk.render.errors import (
    BrowserLaunchFailed,
    BrowserUnavailable,
    RasterizationFailed,
    RenderError,
    RenderTimeout,
)
from dealerdesk.render.locator import BrowserLocator, BrowserStrategy, LaunchPlan
from dealerdesk.render.options import PRESETS, Margins, RenderOptions
from dealerdesk.render.renderer import DocumentRenderer, get_renderer

__all__ = [
    "BrowserLaunchFailed",
    "BrowserLocator",
    "BrowserManager",
    "BrowserStrategy",
    "BrowserUnavailable",
    "DocumentRenderer",
    "LaunchPlan",
    "Margins",
    "PRESETS",
    "RasterizationFailed",
    "RenderError",
    "RenderOptions",
    "RenderTimeout",
    "get_renderer",
]
