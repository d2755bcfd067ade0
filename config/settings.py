"""
Application Settings - Load from YAML configs + .env secrets

Design Philosophy:
- Chart tuning (indicator presets, zoom factors, alert thresholds) → YAML files
  (public, versioned in git)
- Environment and secrets (log level, preference backend, Redis password) → .env

Uses Pydantic for validation and type safety
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.config import load_yaml_safe

CONFIG_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """
    Application settings

    Architecture:
    - Chart tuning → config/chart.yaml (public)
    - Storage endpoints → config/databases.yaml (public)
    - Secrets → .env (gitignored)

    Usage:
        from config.settings import get_settings

        settings = get_settings()
        print(settings.ZOOM_IN_FACTOR)  # From chart.yaml
        print(settings.REDIS_PASSWORD)  # From .env
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Load YAML configs from files (cached at class level)
        if not hasattr(Settings, "_yaml_loaded"):
            Settings._chart_config = load_yaml_safe(CONFIG_DIR / "chart.yaml")
            Settings._database_config = load_yaml_safe(CONFIG_DIR / "databases.yaml")
            Settings._yaml_loaded = True

    # ============================================
    # ENVIRONMENT (.env only)
    # ============================================
    ENVIRONMENT: str = Field(default="local", description="Environment: local, dev, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # ============================================
    # PREFERENCE STORAGE (.env only)
    # ============================================
    PREFERENCE_BACKEND: str = Field(
        default="memory",
        description="Indicator preference backend: memory, redis",
    )

    # Redis password from .env (optional secret)
    REDIS_PASSWORD: str | None = Field(default=None)

    # ============================================
    # REDIS (from YAML + .env)
    # ============================================
    @property
    def REDIS_HOST(self) -> str:
        """Redis host from databases.yaml"""
        return self._database_config.get("redis", {}).get("host", "redis")

    @property
    def REDIS_PORT(self) -> int:
        """Redis port from databases.yaml"""
        return self._database_config.get("redis", {}).get("port", 6379)

    @property
    def REDIS_DB(self) -> int:
        """Redis database from databases.yaml"""
        return self._database_config.get("redis", {}).get("db", 0)

    @property
    def redis_url(self) -> str:
        """Redis connection URL"""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # ============================================
    # INDICATORS (from YAML)
    # ============================================
    @property
    def INDICATORS(self) -> list:
        """List of indicator presets from chart.yaml"""
        return self._chart_config.get("indicators", [])

    @property
    def INDICATOR_MIN_POINTS(self) -> int:
        """Fewest actual prices the engine computes anything for"""
        return self._chart_config.get("settings", {}).get("min_points", 5)

    @property
    def INDICATOR_DEFAULT_SELECTION(self) -> list[str]:
        """Selection used when no stored preference exists"""
        return self._chart_config.get("settings", {}).get("default_selection", ["sma20", "ema12"])

    # ============================================
    # MERGE WINDOW (from YAML)
    # ============================================
    @property
    def ACTUAL_FUTURE_TOLERANCE_SECONDS(self) -> int:
        """Clock skew allowed before an actual price counts as future"""
        return self._chart_config.get("merge", {}).get("actual_future_tolerance_seconds", 60)

    @property
    def MAX_FORECAST_HOURS(self) -> int:
        """Cap on how far past now the window extends"""
        return self._chart_config.get("merge", {}).get("max_forecast_hours", 72)

    @property
    def TIME_RANGES(self) -> dict[str, int]:
        """Time range presets in hours"""
        return self._chart_config.get(
            "time_ranges", {"1D": 24, "5D": 120, "1M": 720, "3M": 2160}
        )

    # ============================================
    # CANDLES (from YAML)
    # ============================================
    @property
    def CANDLE_DOMAIN_PADDING(self) -> float:
        """Fraction of the price span added above and below the y-domain"""
        return self._chart_config.get("candles", {}).get("domain_padding", 0.10)

    @property
    def FORECAST_VOLUME_JITTER(self) -> float:
        """Relative jitter applied to estimated forecast volume when a RNG is given"""
        return self._chart_config.get("candles", {}).get("forecast_volume_jitter", 0.05)

    # ============================================
    # VIEWPORT (from YAML)
    # ============================================
    @property
    def VIEWPORT_MIN_SPAN(self) -> int:
        return self._chart_config.get("viewport", {}).get("min_span", 5)

    @property
    def ZOOM_IN_FACTOR(self) -> float:
        return self._chart_config.get("viewport", {}).get("zoom_in_factor", 0.6)

    @property
    def ZOOM_OUT_FACTOR(self) -> float:
        return self._chart_config.get("viewport", {}).get("zoom_out_factor", 1.5)

    @property
    def JUMP_WINDOW(self) -> int:
        """Points shown around now by jump-to-now"""
        return self._chart_config.get("viewport", {}).get("jump_window", 24)

    @property
    def PAN_SPEED(self) -> float:
        return self._chart_config.get("viewport", {}).get("pan_speed", 1.0)

    # ============================================
    # ALERTS (from YAML)
    # ============================================
    @property
    def ALERT_SPIKE_THRESHOLD(self) -> float:
        return self._chart_config.get("alerts", {}).get("spike_threshold", 100.0)

    @property
    def ALERT_NEGATIVE_THRESHOLD(self) -> float:
        return self._chart_config.get("alerts", {}).get("negative_threshold", 0.0)

    @property
    def ALERT_LOOKAHEAD_POINTS(self) -> int:
        """Predicted points scanned for optimal timing and volatility"""
        return self._chart_config.get("alerts", {}).get("lookahead_points", 24)

    @property
    def ALERT_VOLATILITY_THRESHOLD(self) -> float:
        return self._chart_config.get("alerts", {}).get("volatility_threshold", 50.0)

    # ============================================
    # PREFERENCES (from YAML)
    # ============================================
    @property
    def PREFERENCE_KEY_PREFIX(self) -> str:
        return self._chart_config.get("preferences", {}).get("key_prefix", "chart:indicators")

    @property
    def PREFERENCE_TTL_DAYS(self) -> int:
        return self._chart_config.get("preferences", {}).get("ttl_days", 365)


# Singleton pattern
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.VIEWPORT_MIN_SPAN)
        5
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
