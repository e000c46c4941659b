import json

from dealerdesk.config.loader import (
    convert_keys,
    convert_to_camel,
    load_config,
    save_config,
)
from dealerdesk.config.schema import Config


def test_config_defaults() -> None:
    config = Config()

    assert config.search.min_query_length == 2
    assert config.search.max_results == 15
    assert config.search.failure_policy == "isolate"
    assert config.renderer.viewport_width == 1200
    assert config.renderer.viewport_height == 1600
    assert config.renderer.device_scale_factor == 2
    assert config.renderer.content_timeout_ms == 30000
    assert config.renderer.allow_private_network is False


def test_config_roundtrip_with_camel_case() -> None:
    config = Config()
    config.search.failure_policy = "all_or_nothing"
    config.renderer.extra_args = ["--lang=he-IL"]

    data = convert_to_camel(config.model_dump())
    reloaded = Config.model_validate(convert_keys(data))

    assert "failurePolicy" in data["search"]
    assert reloaded.search.failure_policy == "all_or_nothing"
    assert reloaded.renderer.extra_args == ["--lang=he-IL"]


def test_load_config_falls_back_on_invalid_values(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"search": {"failurePolicy": "sometimes"}}), encoding="utf-8")

    config = load_config(path)

    assert config.search.failure_policy == "isolate"


def test_load_config_reads_camel_case_file(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "store": {"url": "https://db.example", "schemaName": "sales"},
                "renderer": {"renderTimeoutS": 15, "maxConcurrentRenders": 2},
            }
        ),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.store.url == "https://db.example"
    assert config.store.schema_name == "sales"
    assert config.renderer.render_timeout_s == 15
    assert config.renderer.max_concurrent_renders == 2


def test_load_config_falls_back_to_defaults_on_bad_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    config = load_config(path)

    assert config.search.max_results == 15


def test_config_reads_nested_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("DEALERDESK_SEARCH__MAX_RESULTS", "5")
    monkeypatch.setenv("DEALERDESK_RENDERER__MAX_CONCURRENT_RENDERS", "2")

    config = Config()

    assert config.search.max_results == 5
    assert config.renderer.max_concurrent_renders == 2


def test_save_config_writes_camel_case(tmp_path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = Config()
    config.renderer.executable_path = "/usr/bin/chromium"

    save_config(config, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["renderer"]["executablePath"] == "/usr/bin/chromium"
    assert data["search"]["minQueryLength"] == 2
    assert load_config(path).renderer.executable_path == "/usr/bin/chromium"
