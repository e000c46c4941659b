"""On-demand installation of Playwright's bundled Chromium."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

_MISSING_BROWSER_PATTERNS = (
    "executable doesn't exist",
    "please run the following command",
    "browser has not been found",
)


def is_missing_browser_error(exc: BaseException) -> bool:
    """Detect Playwright launch failures caused by missing browser binaries."""
    text = str(exc).lower()
    return any(p in text for p in _MISSING_BROWSER_PATTERNS)


@dataclass(slots=True)
class InstallOutcome:
    ok: bool
    output: str


class BundledBrowserInstaller:
    """Runs `playwright install` at most once per process and remembers the outcome."""

    def __init__(self, *, timeout_s: int = 10 * 60, browsers: Sequence[str] = ("chromium",)):
        self.timeout_s = timeout_s
        self.browsers = [b for b in dict.fromkeys(browsers) if b]
        self._lock = asyncio.Lock()
        self._outcome: InstallOutcome | None = None

    @property
    def attempted(self) -> bool:
        return self._outcome is not None

    async def ensure(self) -> InstallOutcome:
        async with self._lock:
            if self._outcome is None:
                self._outcome = await self._install()
                log = logger.info if self._outcome.ok else logger.error
                log("Playwright install ({}) finished: ok={}", ", ".join(self.browsers), self._outcome.ok)
            return self._outcome

    async def _install(self) -> InstallOutcome:
        if not self.browsers:
            return InstallOutcome(False, "No browser targets specified")

        process = await asyncio.create_subprocess_exec(
            sys.executable,
            "-m",
            "playwright",
            "install",
            *self.browsers,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            await _terminate(process)
            return InstallOutcome(False, f"playwright install timed out after {self.timeout_s}s")
        except BaseException:
            # Cancelled by the caller: never leave the installer running.
            await _terminate(process)
            raise

        output = "\n".join(
            part
            for part in (
                stdout.decode("utf-8", errors="replace").strip(),
                stderr.decode("utf-8", errors="replace").strip(),
            )
            if part
        )
        if process.returncode == 0:
            return InstallOutcome(True, _tail(output) or "Playwright browsers installed")
        return InstallOutcome(
            False, _tail(output) or f"playwright install exited with code {process.returncode}"
        )


def _tail(text: str, max_chars: int = 2000) -> str:
    # Installer progress output is long; the end carries the useful part.
    if len(text) <= max_chars:
        return text
    return "..." + text[-max_chars:]


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        process.kill()
        await process.wait()
