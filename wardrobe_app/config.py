"""Configuration helpers for the wardrobe stylist service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
VALIDATION_POLICIES = ("mandatory", "basic")


@dataclass
class AppConfig:
    """Configuration values for the wardrobe stylist service.

    Secrets (the Gemini and OpenWeather keys) are expected to come from the
    environment; everything else has a local-friendly default so the service
    and the test-suite can start without any configuration at all.
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL
    weather_api_key: Optional[str] = None
    default_location: Optional[str] = None
    wardrobe_db_path: str = "data/wardrobe.db"
    profile_dir: str = "data/profiles"
    upload_dir: str = "data/uploads"
    stylist_timeout_seconds: float = 20.0
    ai_requests_per_minute: int = 15
    weather_cache_minutes: int = 30
    suggestion_limit: int = 5
    fallback_max_outfits: int = 3
    ai_validation_policy: str = "mandatory"
    environment: str | None = None

    def __post_init__(self) -> None:
        policy = (self.ai_validation_policy or "mandatory").strip().lower()
        if policy not in VALIDATION_POLICIES:
            raise ValueError(
                f"Unsupported ai_validation_policy '{self.ai_validation_policy}'. Allowed: {list(VALIDATION_POLICIES)}"
            )
        self.ai_validation_policy = policy

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets can be
        injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("APP_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        return cls(
            api_key=get_value("google_api_key"),
            model=str(get_value("model", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL),
            weather_api_key=get_value("openweather_api_key"),
            default_location=get_value("default_location"),
            wardrobe_db_path=str(get_value("wardrobe_db_path", "data/wardrobe.db")),
            profile_dir=str(get_value("profile_dir", "data/profiles")),
            upload_dir=str(get_value("upload_dir", "data/uploads")),
            stylist_timeout_seconds=float(get_value("stylist_timeout_seconds", "20") or 20),
            ai_requests_per_minute=int(get_value("ai_requests_per_minute", "15") or 15),
            weather_cache_minutes=int(get_value("weather_cache_minutes", "30") or 30),
            suggestion_limit=int(get_value("suggestion_limit", "5") or 5),
            fallback_max_outfits=int(get_value("fallback_max_outfits", "3") or 3),
            ai_validation_policy=str(get_value("ai_validation_policy", "mandatory")),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
