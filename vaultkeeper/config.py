"""
Settings for connecting Vaultkeeper to a Supabase project.

Values come from VAULTKEEPER_* environment variables, a local .env file,
or keyword arguments.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class VaultkeeperConfig(BaseSettings):
    """
    Connection and behaviour settings.

    Sources, highest precedence first:
    1. Keyword arguments passed to the constructor
    2. VAULTKEEPER_* environment variables
    3. A .env file in the working directory

    Example:
        ```python
        config = VaultkeeperConfig()

        config = VaultkeeperConfig(
            supabase_url="https://project.supabase.co",
            supabase_key="service-role-key",
        )
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="VAULTKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    supabase_url: str = Field(
        ...,
        description="Base URL of the Supabase project, https only",
    )

    supabase_key: str = Field(
        ...,
        description="Supabase service role key (reads and writes vault tables)",
    )

    # Bearer token checks use this when set
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon key (token verification; falls back to the service key)",
    )

    db_schema: str = Field(
        default="public",
        description="PostgreSQL schema where the vault tables live",
        alias="schema",
    )

    enable_decision_log: bool = Field(
        default=True,
        description="Emit a structured log event for every authorization decision",
    )

    toggle_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts at flipping a vault before giving up on concurrent toggles",
    )

    debug: bool = Field(
        default=False,
        description="Log at DEBUG level",
    )

    @field_validator("supabase_url")
    @classmethod
    def check_url(cls, v: str) -> str:
        if not v.startswith("https://"):
            raise ValueError("supabase_url must start with https://")
        return v.rstrip("/")

    @field_validator("supabase_key")
    @classmethod
    def check_key(cls, v: str) -> str:
        if not v or len(v) < 10:
            raise ValueError("supabase_key is too short to be a Supabase key")
        return v


def load_config(**kwargs) -> VaultkeeperConfig:
    """
    Build a VaultkeeperConfig, letting ``kwargs`` win over the environment.

    Raises:
        pydantic.ValidationError: a required value is missing or malformed
    """
    return VaultkeeperConfig(**kwargs)
