import os

import pytest

from dealerdesk.config.schema import RendererConfig
from dealerdesk.render.errors import BrowserUnavailable
from dealerdesk.render.locator import BASE_ARGS, SERVERLESS_ARGS, BrowserLocator


def _locator(
    config: RendererConfig | None = None,
    *,
    environ: dict | None = None,
    paths: set[str] | None = None,
    which: dict | None = None,
    bundled: str | None = None,
    platform: str = "linux",
) -> BrowserLocator:
    paths = paths or set()
    which = which or {}
    return BrowserLocator(
        config or RendererConfig(),
        environ=environ or {},
        platform=platform,
        which=lambda name: which.get(name),
        exists=lambda path: path in paths,
        bundled_path=lambda: bundled,
    )


def test_override_from_config_wins() -> None:
    locator = _locator(
        RendererConfig(executable_path="/opt/custom/chrome"),
        environ={"VERCEL": "1"},
        paths={"/opt/custom/chrome", "/opt/chromium/chromium", "/usr/bin/chromium"},
    )

    plan = locator.resolve()

    assert plan.strategy == "override"
    assert plan.executable_path == "/opt/custom/chrome"
    assert plan.serverless is False


def test_override_from_environment_variable() -> None:
    locator = _locator(
        environ={"BROWSER_EXECUTABLE_PATH": "/srv/chrome"},
        paths={"/srv/chrome", "/usr/bin/chromium"},
    )

    assert locator.resolve().executable_path == "/srv/chrome"


def test_missing_override_falls_through_to_system() -> None:
    locator = _locator(
        RendererConfig(executable_path="/nope/chrome"),
        paths={"/usr/bin/chromium"},
    )

    plan = locator.resolve()

    assert plan.strategy == "system"
    assert plan.executable_path == "/usr/bin/chromium"


def test_serverless_uses_trimmed_binary_and_args() -> None:
    locator = _locator(
        environ={"AWS_LAMBDA_FUNCTION_NAME": "pdf"},
        paths={"/opt/chromium/chromium", "/usr/bin/chromium"},
    )

    plan = locator.resolve()

    assert plan.strategy == "serverless"
    assert plan.serverless is True
    assert plan.executable_path == "/opt/chromium/chromium"
    assert list(plan.args[: len(BASE_ARGS)]) == list(BASE_ARGS)
    for arg in SERVERLESS_ARGS:
        assert arg in plan.args


def test_serverless_without_binary_falls_through() -> None:
    locator = _locator(
        environ={"NETLIFY": "true"},
        which={"chromium": "/usr/lib/chromium/chromium"},
        paths={"/usr/lib/chromium/chromium"},
    )

    plan = locator.resolve()

    assert plan.strategy == "system"
    assert plan.executable_path == "/usr/lib/chromium/chromium"
    assert "--single-process" not in plan.args


def test_system_path_lookup_prefers_path_search() -> None:
    locator = _locator(
        which={"google-chrome": "/home/me/bin/google-chrome"},
        paths={"/home/me/bin/google-chrome", "/usr/bin/chromium"},
    )

    assert locator.resolve().executable_path == "/home/me/bin/google-chrome"


def test_windows_checks_local_app_data() -> None:
    local = "C:\\Users\\me\\AppData\\Local"
    expected = os.path.join(local, "Google", "Chrome", "Application", "chrome.exe")
    locator = _locator(environ={"LOCALAPPDATA": local}, paths={expected}, platform="win32")

    plan = locator.resolve()

    assert plan.strategy == "system"
    assert plan.executable_path == expected


def test_bundled_runtime_is_last_resort() -> None:
    locator = _locator(bundled="/root/.cache/ms-playwright/chromium-1200/chrome-linux/chrome")

    plan = locator.resolve()

    assert plan.strategy == "bundled"
    assert plan.executable_path is None


def test_extra_args_are_appended() -> None:
    locator = _locator(RendererConfig(extra_args=["--lang=he-IL"]), paths={"/usr/bin/chromium"})

    assert locator.resolve().args[-1] == "--lang=he-IL"


def test_nothing_found_lists_every_strategy() -> None:
    locator = _locator()

    with pytest.raises(BrowserUnavailable) as excinfo:
        locator.resolve()

    names = [entry.split(":")[0] for entry in excinfo.value.attempted]
    assert names == ["override", "serverless", "system", "bundled"]
    assert "No usable browser found" in str(excinfo.value)


def test_describe_reports_without_counting_a_resolve() -> None:
    locator = _locator(paths={"/usr/bin/chromium"})

    status = locator.describe()

    assert status["available"] is True
    assert status["strategy"] == "system"
    assert status["executablePath"] == "/usr/bin/chromium"
    assert [entry.split(":")[0] for entry in status["attempted"]] == ["override", "serverless"]
    assert locator.resolve_count == 0


def test_describe_when_unavailable() -> None:
    status = _locator().describe()

    assert status["available"] is False
    assert status["strategy"] is None
    assert len(status["attempted"]) == 4
