"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ENERGYLINK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "EnergyLink Pro API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default="http://localhost:54321",
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase anon or service role key.",
    )

    # Geolocation
    geolocation_timeout_seconds: float = Field(default=15.0, gt=0.0)
    geolocation_high_accuracy: bool = True
    geolocation_lookup_url: Optional[str] = Field(
        default=None,
        description="Optional IP geolocation endpoint returning latitude/longitude JSON.",
    )
    default_user_location: tuple[float, float] = Field(
        default=(24.7136, 46.6753),
        description="Fallback (lat, lng) when the user's position is unavailable (Riyadh).",
    )
    default_electrician_location: tuple[float, float] = Field(
        default=(25.2048, 55.2708),
        description="Location stored for electricians registering without coordinates.",
    )

    # Map
    map_default_center: tuple[float, float] = Field(default=(25.2048, 55.2708))
    map_default_zoom: int = Field(default=12, ge=0, le=19)
    map_fit_padding: tuple[float, float] = Field(default=(50.0, 50.0))
    map_max_zoom: int = Field(default=15, ge=0, le=19)
    map_tile_url: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    map_tile_attribution: str = "&copy; OpenStreetMap contributors"

    # Sessions
    session_cookie_name: str = "energylink_session"
    session_cookie_secure: bool = Field(
        default=False,
        description="Send the session cookie over HTTPS only.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator(
        "default_user_location",
        "default_electrician_location",
        "map_default_center",
        "map_fit_padding",
        mode="before",
    )
    @classmethod
    def _parse_float_pair_from_env(cls, value: Any) -> Any:
        """Parse a "lat,lng" style pair (comma-separated or JSON array)."""
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except (json.JSONDecodeError, TypeError):
                parsed = [item.strip() for item in value.split(",") if item.strip()]
            if isinstance(parsed, list) and len(parsed) == 2:
                return (float(parsed[0]), float(parsed[1]))
            raise ValueError(f"Expected two comma-separated numbers, got '{value}'")
        return value


settings = Settings()
