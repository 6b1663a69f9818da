from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""

    # App
    app_base_url: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = 3000

    # Session cookie
    session_secret: str = "change-me-in-production"
    session_cookie_name: str = "diylifestyle_session"
    session_max_age_seconds: int = 24 * 60 * 60

    # Where the OAuth callback lands
    login_success_path: str = "/diylifestyle/index"
    login_failure_path: str = "/diylifestyle/login"

    # Database (MONGO_URI kept for existing deployments' env files)
    database_path: str = Field(
        default="./data/diylifestyle.db",
        validation_alias=AliasChoices("database_path", "mongo_uri"),
    )

    # OAuth CSRF state lifetime
    oauth_state_ttl_seconds: int = 600

    # Logging
    log_level: str = "info"

    @field_validator("database_path")
    @classmethod
    def _reject_mongodb_uri(cls, value: str) -> str:
        if value.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MONGO_URI/DATABASE_PATH must be a SQLite file path, not a MongoDB connection string"
            )
        return value

    @property
    def cookie_secure(self) -> bool:
        return not self.app_base_url.startswith("http://localhost")

    @property
    def google_callback_url(self) -> str:
        return f"{self.app_base_url.rstrip('/')}/auth/google/callback"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
