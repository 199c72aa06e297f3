"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. All secrets are injected via environment — never
hard-coded.

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── MongoDB ───────────────────────────────────────────────────
    # Local dev default matches a plain `docker run mongo` container.
    mongo_uri: str = "mongodb://localhost:27017/launchsite"
    mongo_db_name: str = "launchsite"

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated allowed origins for the map front-end.
    cors_origins_str: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # ─── AI narrative ──────────────────────────────────────────────
    # Get from https://aistudio.google.com/
    gemini_api_key: str = ""

    # When True, all AI calls return canned mock responses.
    # Always True in tests; set False in production with a real key.
    ai_mock_mode: bool = True

    # Disable to serve the purely deterministic analysis text.
    narrative_enabled: bool = True
    narrative_timeout_seconds: float = 20.0

    # ─── Zone validation ───────────────────────────────────────────
    # "overpass" queries OpenStreetMap live; "static" uses the built-in
    # hazard table (no network).
    poi_provider: Literal["overpass", "static"] = "overpass"
    overpass_urls_str: str = (
        "https://overpass-api.de/api/interpreter,"
        "https://overpass.kumi.systems/api/interpreter"
    )
    overpass_timeout_seconds: float = 25.0
    zone_search_radius_m: int = 20_000

    @property
    def overpass_urls(self) -> list[str]:
        return [u.strip() for u in self.overpass_urls_str.split(",") if u.strip()]

    # ─── Reverse geocoding ─────────────────────────────────────────
    nominatim_url: str = "https://nominatim.openstreetmap.org/reverse"
    # Both OSM services require an identifying User-Agent.
    http_user_agent: str = "LaunchSite-Feasibility/0.1 (contact: ops@example.com)"

    # ─── Rate limiting ─────────────────────────────────────────────
    rate_limit_enabled: bool = True
    analyze_rate_limit: str = "30/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Don't fail on unknown env vars
    )


# Module-level singleton — import this everywhere instead of instantiating Settings()
settings = Settings()
