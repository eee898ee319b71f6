from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # All overridable through DEMO_* environment variables
    model_config = SettingsConfigDict(env_prefix="DEMO_", case_sensitive=False)

    service_name: str = "cicd-demo"
    version: str = "1.0.0"
    log_level: str = "INFO"
    # Default for create_app(); off when another process owns the loguru sinks
    configure_logging: bool = True

    # Home page content
    page_title: str = "CI/CD Demo"
    heading: str = "Welcome to My CI/CD Demo"


settings = Settings()
