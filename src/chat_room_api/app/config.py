from dataclasses import dataclass, field

from chat_room_api.infrastructure.platform_manager import get_parameters

# Constants that don't change
BROADCAST_TARGET = "Todos"
JOIN_TEXT = "entra na sala..."
LEAVE_TEXT = "sai da sala..."

MESSAGE_TYPE = "message"
PRIVATE_MESSAGE_TYPE = "private_message"
STATUS_TYPE = "status"

DEFAULTS = {
    "redis_url": "redis://localhost:6379/0",
    "chat_namespace": "bate-papo-uol",
    "chat_host": "0.0.0.0",
    "chat_port": "5000",
    "sweep_interval_ms": "15000",
    "staleness_threshold_ms": "10000",
    "cors_allow_origins": "*",
    "log_level": "INFO",
}


@dataclass
class ChatRoomSettings:
    """Chat room configuration settings loaded from the environment."""

    # Store settings
    redis_url: str
    chat_namespace: str

    # Server settings
    chat_host: str
    chat_port: int
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])

    # Inactivity sweep settings
    sweep_interval_ms: int = 15000
    staleness_threshold_ms: int = 10000

    log_level: str = "INFO"


class Config:
    """Singleton configuration manager for the chat room."""

    _instance = None
    _settings = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_settings(self) -> ChatRoomSettings:
        """Get chat room settings, loading from the environment if not already cached."""
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings

    def reset(self) -> None:
        """Drop the cached settings so the next call reloads them."""
        self._settings = None

    def _load_settings(self) -> ChatRoomSettings:
        """Load settings from environment variables."""
        parameters = get_parameters(list(DEFAULTS), DEFAULTS)

        cors_param = parameters["cors_allow_origins"] or ""
        cors_allow_origins = [origin.strip() for origin in cors_param.split(",") if origin.strip()]

        settings = ChatRoomSettings(
            redis_url=parameters["redis_url"] or "",
            chat_namespace=parameters["chat_namespace"] or "",
            chat_host=parameters["chat_host"] or "",
            chat_port=self._to_int("chat_port", parameters["chat_port"]),
            cors_allow_origins=cors_allow_origins,
            sweep_interval_ms=self._to_int("sweep_interval_ms", parameters["sweep_interval_ms"]),
            staleness_threshold_ms=self._to_int(
                "staleness_threshold_ms", parameters["staleness_threshold_ms"]
            ),
            log_level=(parameters["log_level"] or "INFO").upper(),
        )

        # Validate settings
        self._validate_settings(settings)

        return settings

    @staticmethod
    def _to_int(name: str, value: str | None) -> int:
        try:
            return int(value or "")
        except ValueError as e:
            raise ValueError(f"Configuration value is invalid: {name.upper()}") from e

    def _validate_settings(self, settings: ChatRoomSettings) -> None:
        """Validate that all required settings have valid values."""
        required_fields = ["redis_url", "chat_namespace", "chat_host"]
        for field_name in required_fields:
            if not getattr(settings, field_name):
                raise ValueError(f"Configuration value is invalid: {field_name.upper()}")

        positive_fields = ["chat_port", "sweep_interval_ms", "staleness_threshold_ms"]
        for field_name in positive_fields:
            if getattr(settings, field_name) <= 0:
                raise ValueError(f"Configuration value is invalid: {field_name.upper()}")


# Create singleton instance
config = Config()


# Convenience functions
def get_settings() -> ChatRoomSettings:
    """Get chat room settings from the singleton config."""
    return config.get_settings()
