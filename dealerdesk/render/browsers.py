"""Shared headless browser process, launched once and reused."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from loguru import logger

from dealerdesk.render.errors import BrowserLaunchFailed, BrowserUnavailable
from dealerdesk.render.installer import BundledBrowserInstaller, is_missing_browser_error
from dealerdesk.render.locator import BrowserLocator, LaunchPlan

if TYPE_CHECKING:
    from dealerdesk.config.schema import RendererConfig


async def start_playwright() -> Any:
    from playwright.async_api import async_playwright

    return await async_playwright().start()


class BrowserManager:
    """
    Owns the single browser process used for rendering.

    The browser is launched lazily on first use behind a lock, so concurrent
    first callers share one launch. Callers only ever see per-call pages via
    `page()`; the browser handle itself never leaves this class.
    """

    def __init__(
        self,
        config: RendererConfig | None = None,
        *,
        locator: BrowserLocator | None = None,
        installer: BundledBrowserInstaller | None = None,
        driver_factory: Callable[[], Awaitable[Any]] = start_playwright,
    ):
        from dealerdesk.config.schema import RendererConfig

        self.config = config or RendererConfig()
        self.locator = locator or BrowserLocator(self.config)
        self.installer = installer or BundledBrowserInstaller(timeout_s=self.config.install_timeout_s)
        self._driver_factory = driver_factory
        self._lock = asyncio.Lock()
        self._playwright: Any = None
        self._browser: Any = None
        self.plan: LaunchPlan | None = None
        self.launch_count = 0

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    @asynccontextmanager
    async def page(self, *, viewport: dict[str, int], device_scale_factor: float) -> AsyncIterator[Any]:
        """Yield a fresh page in its own context; it is closed on every exit path."""
        browser = await self._acquire()
        context = await browser.new_context(
            viewport=viewport,
            device_scale_factor=device_scale_factor,
            accept_downloads=False,
        )
        try:
            yield await context.new_page()
        finally:
            try:
                await context.close()
            except Exception as e:
                logger.warning("Failed to close render page: {}", e)

    async def start(self) -> None:
        """Launch the shared browser now, locating or installing it as needed."""
        await self._acquire()

    async def close(self) -> None:
        """Shut the shared browser down. Safe to call when nothing is running."""
        async with self._lock:
            browser, self._browser = self._browser, None
            playwright, self._playwright = self._playwright, None
            self.plan = None

        try:
            if browser is not None:
                try:
                    await browser.close()
                except Exception as e:
                    logger.warning("Shared browser did not close cleanly: {}", e)
                else:
                    logger.info("Shared browser closed")
        finally:
            if playwright is not None:
                await playwright.stop()

    async def _acquire(self) -> Any:
        async with self._lock:
            if self._browser is not None:
                if self._browser.is_connected():
                    return self._browser
                logger.warning("Shared browser disconnected; launching a new one")
                self._browser = None

            plan = await self._resolve_plan()
            if self._playwright is None:
                self._playwright = await self._driver_factory()
            self._browser = await self._launch(plan)
            self.plan = plan
            self.launch_count += 1
            return self._browser

    async def _resolve_plan(self) -> LaunchPlan:
        try:
            return self.locator.resolve()
        except BrowserUnavailable as exc:
            if not self.config.auto_install_browsers:
                raise
            outcome = await self.installer.ensure()
            if not outcome.ok:
                raise BrowserUnavailable([*exc.attempted, f"install: {outcome.output}"]) from exc
            return self.locator.resolve()

    async def _launch(self, plan: LaunchPlan) -> Any:
        chromium = self._playwright.chromium
        try:
            browser = await chromium.launch(
                headless=True,
                executable_path=plan.executable_path,
                args=plan.args,
            )
            logger.info("Browser launched via '{}'", plan.strategy)
            return browser
        except Exception as first_error:
            if plan.serverless:
                # The trimmed serverless binary has no runtime default to fall back to.
                raise BrowserLaunchFailed(plan.strategy, str(first_error)) from first_error
            last_error = first_error

        if plan.executable_path is not None:
            logger.warning(
                "Browser launch via '{}' failed ({}); retrying with the runtime default",
                plan.strategy,
                last_error,
            )
            try:
                return await chromium.launch(headless=True, args=plan.args)
            except Exception as retry_error:
                last_error = retry_error

        if not (self.config.auto_install_browsers and is_missing_browser_error(last_error)):
            raise BrowserLaunchFailed(plan.strategy, str(last_error)) from last_error

        outcome = await self.installer.ensure()
        if not outcome.ok:
            raise BrowserLaunchFailed(
                plan.strategy, f"{last_error}; install failed: {outcome.output}"
            ) from last_error
        try:
            return await chromium.launch(headless=True, args=plan.args)
        except Exception as e:
            raise BrowserLaunchFailed(plan.strategy, str(e)) from e
