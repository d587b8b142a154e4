from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "room_relay"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str
    AUTO_CREATE_TABLES: bool = True

    IP_SALT: str = ""
    CORS_ORIGINS: list[str] = ["*"]

    HEARTBEAT_INTERVAL_SECONDS: float = 30.0
    OUTBOUND_QUEUE_SIZE: int = 256
    HISTORY_LIMIT: int = 2000
    REQUIRE_JOIN: bool = False

settings = Settings()
