"""
GasGuard Configuration — pydantic-settings based.

All settings are read from environment variables (GASGUARD_ prefix) or .env file.
Every value has a default, so the scanner runs with zero configuration.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Engines ──
    rust_engine: Literal["grammar", "heuristic", "all"] = Field(
        default="grammar",
        description=(
            "Engine for .rs contracts: 'grammar' (tree-sitter usage analysis), "
            "'heuristic' (text-recovered rule catalogue) or 'all' (both, grammar first)"
        ),
    )
    disabled_rules: list[str] = Field(
        default_factory=list, description="Rule ids disabled when engines are built"
    )

    # ── Scanning ──
    scan_workers: int = Field(
        default=1, ge=1, description="Worker threads for directory scans (1 = sequential)"
    )
    max_file_size_bytes: int = Field(
        default=1_000_000, description="Max contract file size to accept (bytes)"
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Root log level for app and CLI")

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    model_config = {
        "env_prefix": "GASGUARD_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance — imported by other modules
settings = Settings()
