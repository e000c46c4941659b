"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

FailurePolicy = Literal["isolate", "all_or_nothing"]


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoreConfig(Base):
    """PostgREST entity store connection."""

    url: str = ""  # Falls back to SUPABASE_URL
    api_key: str = ""  # Falls back to SUPABASE_KEY
    schema_name: str = "public"
    timeout_s: float = 10.0


class SearchConfig(Base):
    """Global entity search behaviour."""

    min_query_length: int = 2
    max_results: int = 15
    per_store_limit: int = 10
    exact_id_number_limit: int = 5
    exact_id_limit: int = 1
    debounce_ms: int = 300
    failure_policy: FailurePolicy = "isolate"


class RendererConfig(Base):
    """Headless browser PDF rendering."""

    executable_path: str = ""
    executable_path_env: str = "BROWSER_EXECUTABLE_PATH"
    serverless_executable_path: str = "/opt/chromium/chromium"
    extra_args: list[str] = Field(default_factory=list)
    viewport_width: int = 1200
    viewport_height: int = 1600
    device_scale_factor: float = 2
    css_framework_url: str = "https://cdn.tailwindcss.com"
    content_timeout_ms: int = 30000
    network_idle_timeout_ms: int = 5000
    fonts_timeout_ms: int = 3000
    images_timeout_ms: int = 5000
    render_timeout_s: float = 60
    max_concurrent_renders: int = 4
    auto_install_browsers: bool = True
    install_timeout_s: int = 10 * 60
    allow_private_network: bool = False
    block_file_scheme: bool = True


class ServerConfig(Base):
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class Config(BaseSettings):
    """Root configuration for dealerdesk."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    model_config = SettingsConfigDict(
        env_prefix="DEALERDESK_",
        env_nested_delimiter="__",
    )
