import asyncio

import pytest

from dealerdesk.config.schema import RendererConfig
from dealerdesk.render.browsers import BrowserManager
from dealerdesk.render.locator import BrowserLocator


class FakePage:
    def __init__(
        self,
        tracker: dict,
        *,
        pdf_bytes: bytes = b"%PDF-1.7\n%fake document\n%%EOF",
        pdf_error: Exception | None = None,
        pdf_delay_s: float = 0.0,
        content_error: Exception | None = None,
        idle_error: Exception | None = None,
        fonts_delay_s: float = 0.0,
        images_pending: int = 0,
    ):
        self.tracker = tracker
        self.pdf_bytes = pdf_bytes
        self.pdf_error = pdf_error
        self.pdf_delay_s = pdf_delay_s
        self.content_error = content_error
        self.idle_error = idle_error
        self.fonts_delay_s = fonts_delay_s
        self.images_pending = images_pending
        self.calls: list[str] = []
        self.html = ""
        self.route_handler = None
        self.pdf_kwargs: dict = {}

    async def route(self, pattern, handler):
        self.calls.append("route")
        self.route_handler = handler

    async def set_content(self, html, wait_until=None, timeout=None):
        self.calls.append("set_content")
        self.html = html
        if self.content_error:
            raise self.content_error

    async def wait_for_load_state(self, state, timeout=None):
        self.calls.append(state)
        if self.idle_error:
            raise self.idle_error

    async def evaluate(self, script, *args):
        if "document.fonts" in script:
            self.calls.append("fonts")
            await asyncio.sleep(self.fonts_delay_s)
            return "loaded"
        self.calls.append("images")
        return self.images_pending

    async def pdf(self, **kwargs):
        self.calls.append("pdf")
        self.pdf_kwargs = kwargs
        self.tracker["active"] += 1
        self.tracker["peak"] = max(self.tracker["peak"], self.tracker["active"])
        try:
            await asyncio.sleep(self.pdf_delay_s)
            if self.pdf_error:
                raise self.pdf_error
            return self.pdf_bytes
        finally:
            self.tracker["active"] -= 1


class FakeContext:
    def __init__(self, page: FakePage, options: dict):
        self.page = page
        self.options = options
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, chromium: "FakeChromium"):
        self.chromium = chromium
        self.contexts: list[FakeContext] = []
        self.connected = True
        self.closed = False

    def is_connected(self) -> bool:
        return self.connected

    async def new_context(self, **options):
        page = FakePage(self.chromium.tracker, **self.chromium.page_options)
        context = FakeContext(page, options)
        self.contexts.append(context)
        self.chromium.pages.append(page)
        return context

    async def close(self):
        self.closed = True
        self.connected = False


class FakeChromium:
    def __init__(self):
        self.launches: list[dict] = []
        self.failures: list[Exception] = []
        self.browsers: list[FakeBrowser] = []
        self.pages: list[FakePage] = []
        self.page_options: dict = {}
        self.tracker = {"active": 0, "peak": 0}

    async def launch(self, **kwargs):
        self.launches.append(kwargs)
        await asyncio.sleep(0)
        if self.failures:
            raise self.failures.pop(0)
        browser = FakeBrowser(self)
        self.browsers.append(browser)
        return browser


class FakePlaywright:
    def __init__(self):
        self.chromium = FakeChromium()
        self.starts = 0
        self.stopped = False

    async def stop(self):
        self.stopped = True


class FakeInstaller:
    def __init__(self, ok: bool = True, on_install=None, delay_s: float = 0.0):
        self.ok = ok
        self.on_install = on_install
        self.delay_s = delay_s
        self.calls = 0

    async def ensure(self):
        from dealerdesk.render.installer import InstallOutcome

        self.calls += 1
        await asyncio.sleep(self.delay_s)
        if self.on_install:
            self.on_install()
        return InstallOutcome(self.ok, "installed" if self.ok else "network unreachable")


def make_locator(
    config: RendererConfig,
    *,
    environ: dict | None = None,
    paths: tuple[str, ...] = ("/usr/bin/chromium",),
    which: dict | None = None,
    bundled=None,
) -> BrowserLocator:
    which = which or {}
    return BrowserLocator(
        config,
        environ=environ or {},
        platform="linux",
        which=lambda name: which.get(name),
        exists=lambda path: path in paths,
        bundled_path=bundled or (lambda: None),
    )


@pytest.fixture
def fake_playwright() -> FakePlaywright:
    return FakePlaywright()


@pytest.fixture
def fake_installer() -> FakeInstaller:
    return FakeInstaller()


@pytest.fixture
def make_manager(fake_playwright, fake_installer):
    """Build a BrowserManager wired to the fake driver; locator kwargs pass through."""

    def build(config: RendererConfig | None = None, **locator_kwargs) -> BrowserManager:
        cfg = config or RendererConfig(auto_install_browsers=False)

        async def driver_factory():
            fake_playwright.starts += 1
            return fake_playwright

        return BrowserManager(
            cfg,
            locator=make_locator(cfg, **locator_kwargs),
            installer=fake_installer,  # type: ignore[arg-type]
            driver_factory=driver_factory,
        )

    return build
