from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HarnessSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SMOKE_", env_file=".env", extra="ignore")

    # Target server (used when no in-process app is handed to the probe)
    base_url: str = Field(default="http://localhost:8000")

    # Upper bound for a single probe; unreachable servers fail instead of hanging
    timeout_seconds: float = Field(default=5.0, gt=0)

    # Home page contract
    expected_heading: str = Field(default="<h1>Welcome to My CI/CD Demo</h1>")
    expected_content_type: str = Field(default="html")

    # Logging
    log_level: str = Field(default="INFO")

    # Tests that hit base_url over the network are skipped unless enabled
    run_integration: bool = Field(default=False)


settings = HarnessSettings()
