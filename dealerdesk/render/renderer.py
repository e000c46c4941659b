"""HTML to PDF rendering on a shared headless Chromium."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

from loguru import logger
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from dealerdesk.render.browsers import BrowserManager
from dealerdesk.render.errors import RasterizationFailed, RenderError, RenderTimeout
from dealerdesk.render.options import RenderOptions
from dealerdesk.render.safety import request_url_block_reason
from dealerdesk.render.template import compose

if TYPE_CHECKING:
    from dealerdesk.config.schema import RendererConfig

PDF_MAGIC = b"%PDF-"

# Resolves with the number of images still pending when the bound is hit;
# an image that fails to load counts as settled.
_WAIT_FOR_IMAGES_JS = """
(timeoutMs) => new Promise((resolve) => {
  const pending = new Set(Array.from(document.images).filter((img) => !img.complete));
  if (pending.size === 0) {
    resolve(0);
    return;
  }
  const settle = (img) => {
    pending.delete(img);
    if (pending.size === 0) resolve(0);
  };
  pending.forEach((img) => {
    img.addEventListener('load', () => settle(img), { once: true });
    img.addEventListener('error', () => settle(img), { once: true });
  });
  setTimeout(() => resolve(pending.size), timeoutMs);
})
"""

_WAIT_FOR_FONTS_JS = "() => document.fonts.ready.then(() => document.fonts.status)"


class DocumentRenderer:
    """Turn HTML into PDF bytes using one long-lived browser."""

    def __init__(
        self,
        config: RendererConfig | None = None,
        browsers: BrowserManager | None = None,
    ):
        from dealerdesk.config.schema import RendererConfig

        self.config = config or RendererConfig()
        self.browsers = browsers or BrowserManager(self.config)
        self._slots = asyncio.Semaphore(max(1, self.config.max_concurrent_renders))

    async def generate_pdf(self, html: str, options: RenderOptions | None = None) -> bytes:
        """
        Render `html` into a complete PDF document.

        Raises:
            ValueError: `html` is empty.
            RenderError: any failure; partial output is never returned.
        """
        if not html or not html.strip():
            raise ValueError("html must not be empty")

        opts = options or RenderOptions()
        started_at = time.monotonic()
        try:
            # Launch (and a first-run browser install) is bounded by its own
            # timeouts, not by render_timeout_s.
            await self.browsers.start()
            pdf = await asyncio.wait_for(
                self._render(html, opts),
                timeout=self.config.render_timeout_s,
            )
        except asyncio.TimeoutError as e:
            logger.error("PDF render exceeded {}s", self.config.render_timeout_s)
            raise RenderTimeout("render", self.config.render_timeout_s) from e
        except RenderError as e:
            logger.error("PDF render failed: {}", e)
            raise
        except Exception as e:
            logger.error("PDF render failed: {}", e)
            raise RenderError(f"PDF generation failed: {e}") from e

        logger.info(
            "Rendered PDF ({} bytes, {} {}) in {}ms",
            len(pdf),
            opts.format,
            opts.orientation,
            int((time.monotonic() - started_at) * 1000),
        )
        return pdf

    async def close(self) -> None:
        await self.browsers.close()

    async def _render(self, html: str, opts: RenderOptions) -> bytes:
        async with self._slots:
            viewport = {"width": self.config.viewport_width, "height": self.config.viewport_height}
            async with self.browsers.page(
                viewport=viewport,
                device_scale_factor=self.config.device_scale_factor,
            ) as page:
                await page.route("**/*", self._apply_network_guard)
                document = compose(html, opts, css_framework_url=self.config.css_framework_url)
                await self._load(page, document)
                await self._wait_for_fonts(page)
                await self._wait_for_images(page)
                return await self._rasterize(page, opts)

    async def _load(self, page: Any, document: str) -> None:
        step_started = time.monotonic()
        try:
            await page.set_content(
                document,
                wait_until="domcontentloaded",
                timeout=self.config.content_timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            raise RenderTimeout("content", self.config.content_timeout_ms / 1000) from e

        try:
            await page.wait_for_load_state(
                "networkidle",
                timeout=self.config.network_idle_timeout_ms,
            )
        except PlaywrightTimeoutError:
            logger.warning(
                "Network not idle after {}ms; rendering what has loaded",
                self.config.network_idle_timeout_ms,
            )
        logger.debug("Content loaded in {}ms", int((time.monotonic() - step_started) * 1000))

    async def _wait_for_fonts(self, page: Any) -> None:
        timeout_s = self.config.fonts_timeout_ms / 1000
        try:
            await asyncio.wait_for(page.evaluate(_WAIT_FOR_FONTS_JS), timeout=timeout_s)
        except asyncio.TimeoutError:
            logger.warning("Fonts still loading after {}ms; continuing", self.config.fonts_timeout_ms)

    async def _wait_for_images(self, page: Any) -> None:
        timeout_ms = self.config.images_timeout_ms
        try:
            # The in-page timer resolves first; the outer bound covers a stuck page.
            pending = await asyncio.wait_for(
                page.evaluate(_WAIT_FOR_IMAGES_JS, timeout_ms),
                timeout=timeout_ms / 1000 + 1,
            )
        except asyncio.TimeoutError:
            pending = None
        if pending:
            logger.warning("{} image(s) still loading after {}ms; continuing", pending, timeout_ms)
        elif pending is None:
            logger.warning("Image wait did not settle after {}ms; continuing", timeout_ms)

    async def _rasterize(self, page: Any, opts: RenderOptions) -> bytes:
        try:
            pdf = await page.pdf(
                format=opts.format,
                landscape=opts.landscape,
                margin=opts.margins.as_dict(),
                scale=opts.scale,
                print_background=True,
                prefer_css_page_size=True,
            )
        except Exception as e:
            raise RasterizationFailed(f"PDF rasterization failed: {e}") from e

        if not pdf or not bytes(pdf).startswith(PDF_MAGIC):
            raise RasterizationFailed("Rasterizer returned data without a PDF header")
        return bytes(pdf)

    async def _apply_network_guard(self, route: Any, request: Any) -> None:
        reason = request_url_block_reason(
            request.url,
            allow_private_network=self.config.allow_private_network,
            block_file_scheme=self.config.block_file_scheme,
        )
        if reason:
            logger.debug("Blocked render subresource {}: {}", request.url, reason)
            await route.abort("blockedbyclient")
            return
        await route.continue_()


_renderer: DocumentRenderer | None = None


def get_renderer(config: RendererConfig | None = None) -> DocumentRenderer:
    """Process-wide renderer; the first call's config wins."""
    global _renderer
    if _renderer is None:
        _renderer = DocumentRenderer(config)
    return _renderer
