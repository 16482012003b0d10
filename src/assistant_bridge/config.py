"""Configuration module for assistant-bridge using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from assistant_bridge.remote.client import DEFAULT_BASE_URL
from assistant_bridge.services.orchestrator import DEFAULT_POLL_INTERVAL
from assistant_bridge.services.registration import DEFAULT_MODEL


class BridgeSettings(BaseSettings):
    """Main configuration settings for assistant-bridge.

    All settings can be overridden via environment variables with the BRIDGE_ prefix.
    For example, BRIDGE_AGENT_ID will override the agent_id setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Remote service
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    request_timeout_s: float = 30.0

    # Agent, as returned by `assistant-bridge register`
    agent_id: str | None = None
    model: str = DEFAULT_MODEL

    # Capability provider, as "module:ClassName"
    provider: str = "assistant_bridge.providers.calculator:Calculator"

    # Runs
    prompt_timeout_s: float = Field(default=60.0, gt=0)
    poll_interval_s: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)

    # Log capability calls with their raw arguments
    debug: bool = False

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="BRIDGE_")
