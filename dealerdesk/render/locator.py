"""Locate a usable Chromium executable across deployment targets."""

from __future__ import annotations

import os
import shutil
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from dealerdesk.render.errors import BrowserUnavailable

if TYPE_CHECKING:
    from dealerdesk.config.schema import RendererConfig

BASE_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-features=VizDisplayCompositor",
    "--font-render-hinting=none",
)

SERVERLESS_ARGS = (
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-zygote",
    "--single-process",
)

SERVERLESS_ENV_MARKERS = (
    "AWS_LAMBDA_FUNCTION_NAME",
    "LAMBDA_TASK_ROOT",
    "VERCEL",
    "NETLIFY",
    "FUNCTION_TARGET",
)

SYSTEM_PATHS: dict[str, tuple[str, ...]] = {
    "linux": (
        "/usr/bin/google-chrome-stable",
        "/usr/bin/google-chrome",
        "/usr/bin/chromium-browser",
        "/usr/bin/chromium",
        "/snap/bin/chromium",
        "/usr/local/bin/chrome",
        "/usr/local/bin/chromium",
    ),
    "darwin": (
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        "/Applications/Chromium.app/Contents/MacOS/Chromium",
    ),
    "win32": (
        "C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe",
        "C:\\Program Files (x86)\\Google\\Chrome\\Application\\chrome.exe",
    ),
}

WHICH_NAMES: dict[str, tuple[str, ...]] = {
    "linux": ("google-chrome-stable", "google-chrome", "chromium-browser", "chromium"),
    "darwin": ("google-chrome", "chromium"),
    "win32": ("chrome",),
}

_BUNDLED_PATTERNS = (
    "chromium-*/chrome-*/chrome",
    "chromium-*/chrome-*/chrome.exe",
    "chromium-*/chrome-*/Chromium.app/Contents/MacOS/Chromium",
    "chromium-*/chrome-*/Google Chrome for Testing.app/Contents/MacOS/Google Chrome for Testing",
    "chromium_headless_shell-*/chrome-*/headless_shell",
    "chromium_headless_shell-*/chrome-*/headless_shell.exe",
    "chromium_headless_shell-*/chrome-*/chrome-headless-shell",
    "chromium_headless_shell-*/chrome-*/chrome-headless-shell.exe",
)


@dataclass(slots=True)
class LaunchPlan:
    """How to start the browser, as decided by one strategy."""

    strategy: str
    executable_path: str | None
    args: list[str] = field(default_factory=list)
    serverless: bool = False


Probe = Callable[[], "LaunchPlan | str"]


@dataclass(slots=True)
class BrowserStrategy:
    """One acquisition step: returns a plan, or a reason it does not apply."""

    name: str
    probe: Probe


def platform_family(platform: str) -> str:
    if platform.startswith("win"):
        return "win32"
    if platform == "darwin":
        return "darwin"
    return "linux"


class BrowserLocator:
    """Run the ordered acquisition strategies; first usable plan wins."""

    def __init__(
        self,
        config: RendererConfig | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        platform: str | None = None,
        which: Callable[[str], str | None] = shutil.which,
        exists: Callable[[str], bool] = os.path.exists,
        bundled_path: Callable[[], str | None] | None = None,
    ):
        from dealerdesk.config.schema import RendererConfig

        self.config = config or RendererConfig()
        self.environ = os.environ if environ is None else environ
        self.family = platform_family(platform or sys.platform)
        self._which = which
        self._exists = exists
        self._bundled_path = bundled_path or self._default_bundled_path
        self.resolve_count = 0
        self.strategies: list[BrowserStrategy] = [
            BrowserStrategy("override", self._probe_override),
            BrowserStrategy("serverless", self._probe_serverless),
            BrowserStrategy("system", self._probe_system),
            BrowserStrategy("bundled", self._probe_bundled),
        ]

    def resolve(self) -> LaunchPlan:
        """Return the first applicable launch plan or raise BrowserUnavailable."""
        self.resolve_count += 1
        attempted: list[str] = []
        for strategy in self.strategies:
            outcome = strategy.probe()
            if isinstance(outcome, LaunchPlan):
                logger.info(
                    "Browser strategy '{}' selected (executable: {})",
                    strategy.name,
                    outcome.executable_path or "runtime default",
                )
                return outcome
            attempted.append(f"{strategy.name}: {outcome}")
            logger.debug("Browser strategy '{}' skipped: {}", strategy.name, outcome)
        raise BrowserUnavailable(attempted)

    def describe(self) -> dict[str, Any]:
        """Report which strategy would be used, without launching anything."""
        attempted: list[str] = []
        for strategy in self.strategies:
            outcome = strategy.probe()
            if isinstance(outcome, LaunchPlan):
                return {
                    "available": True,
                    "strategy": outcome.strategy,
                    "executablePath": outcome.executable_path,
                    "serverless": outcome.serverless,
                    "attempted": attempted,
                }
            attempted.append(f"{strategy.name}: {outcome}")
        return {
            "available": False,
            "strategy": None,
            "executablePath": None,
            "serverless": False,
            "attempted": attempted,
        }

    def is_serverless(self) -> bool:
        return any(self.environ.get(marker) for marker in SERVERLESS_ENV_MARKERS)

    def _args(self, *extra: str) -> list[str]:
        return [*BASE_ARGS, *extra, *self.config.extra_args]

    def _probe_override(self) -> LaunchPlan | str:
        env_name = self.config.executable_path_env
        path = self.config.executable_path or (self.environ.get(env_name, "") if env_name else "")
        if not path:
            return "no override configured"
        if not self._exists(path):
            logger.warning("Browser override is set but file doesn't exist: {}", path)
            return f"override path does not exist: {path}"
        return LaunchPlan("override", path, self._args())

    def _probe_serverless(self) -> LaunchPlan | str:
        if not self.is_serverless():
            return "not a serverless environment"
        path = self.config.serverless_executable_path
        if not path or not self._exists(path):
            return f"serverless binary not found: {path or '(unset)'}"
        return LaunchPlan("serverless", path, self._args(*SERVERLESS_ARGS), serverless=True)

    def _probe_system(self) -> LaunchPlan | str:
        for name in WHICH_NAMES[self.family]:
            found = self._which(name)
            if found and self._exists(found):
                return LaunchPlan("system", found, self._args())

        for candidate in self._system_candidates():
            if self._exists(candidate):
                return LaunchPlan("system", candidate, self._args())
        return f"no Chrome/Chromium in PATH or well-known {self.family} locations"

    def _probe_bundled(self) -> LaunchPlan | str:
        path = self._bundled_path()
        if not path:
            return "Playwright Chromium is not installed"
        # Playwright resolves its own binary, so no explicit path is passed.
        return LaunchPlan("bundled", None, self._args())

    def _system_candidates(self) -> list[str]:
        candidates = list(SYSTEM_PATHS[self.family])
        local_app_data = self.environ.get("LOCALAPPDATA")
        if self.family == "win32" and local_app_data:
            candidates.append(
                os.path.join(local_app_data, "Google", "Chrome", "Application", "chrome.exe")
            )
        return candidates

    def _default_bundled_path(self) -> str | None:
        for root in self._playwright_cache_dirs():
            if not root.is_dir():
                continue
            for pattern in _BUNDLED_PATTERNS:
                for match in sorted(root.glob(pattern), reverse=True):
                    if match.is_file():
                        return str(match)
        return None

    def _playwright_cache_dirs(self) -> list[Path]:
        override = self.environ.get("PLAYWRIGHT_BROWSERS_PATH")
        if override and override != "0":
            return [Path(override)]
        if self.family == "win32":
            base = self.environ.get("LOCALAPPDATA")
            return [Path(base) / "ms-playwright"] if base else []
        if self.family == "darwin":
            return [Path.home() / "Library" / "Caches" / "ms-playwright"]
        cache = self.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
        return [Path(cache) / "ms-playwright"]
