"""
Incubator Bot — Configuration
All tunable parameters in one place.
"""

import os
from dataclasses import dataclass, field


@dataclass
class IncubatorConfig:
    use_egg_incubator_min_km: float = 2.0   # Limited incubators skip eggs below this
    long_egg_km: float = 10.0               # Longest egg tier
    long_egg_min_level: int = 20            # Hold long eggs until this level
    run_interval_sec: int = 60              # Pause between task runs


@dataclass
class ProfileConfig:
    profile_path: str = "./data/profile"

    @property
    def incubators_file(self) -> str:
        return os.path.join(self.profile_path, "temp", "incubators.json")


@dataclass
class GameConfig:
    base_url: str = "http://localhost:8000/api"
    auth_token: str = ""
    request_timeout_sec: int = 30


@dataclass
class NotificationConfig:
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    enabled: bool = True


@dataclass
class BotConfig:
    incubators: IncubatorConfig = field(default_factory=IncubatorConfig)
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    game: GameConfig = field(default_factory=GameConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Load config with environment variable overrides."""
        config = cls()
        config.game.base_url = os.getenv("GAME_API_URL", config.game.base_url)
        config.game.auth_token = os.getenv("GAME_AUTH_TOKEN", "")
        config.profile.profile_path = os.getenv("PROFILE_PATH", config.profile.profile_path)
        config.incubators.use_egg_incubator_min_km = float(
            os.getenv("USE_EGG_INCUBATOR_MIN_KM", str(config.incubators.use_egg_incubator_min_km))
        )
        config.incubators.run_interval_sec = int(
            os.getenv("RUN_INTERVAL_SEC", str(config.incubators.run_interval_sec))
        )
        config.notifications.telegram_bot_token = os.getenv("TELEGRAM_BOT_TOKEN", "")
        config.notifications.telegram_chat_id = os.getenv("TELEGRAM_CHAT_ID", "")
        config.log_level = os.getenv("LOG_LEVEL", "INFO")
        return config
