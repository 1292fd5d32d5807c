"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # Reported by /health and the OpenAPI doc
    VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str = "sqlite:///./flowaborate.db"

    # Identity provider session tokens (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_AUDIENCE: str = ""  # e.g. "authenticated" for hosted identity providers

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Frontend (invite links, email call-to-action links)
    FRONTEND_URL: str = "http://localhost:3000"

    # Internal scheduled endpoints (cron jobs)
    INTERNAL_SECRET: str = ""  # Secret for /internal/scheduled/* endpoints

    # Outbound email (Resend). Empty key = dry run (log only)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "Flowaborate <onboarding@resend.dev>"
    EMAIL_SEND_TIMEOUT_SECONDS: float = 10.0

    # Exception detection thresholds
    NO_SHOW_THRESHOLD_HOURS: int = 24
    STALLED_THRESHOLD_DAYS: int = 7
    EDITING_DEADLINE_DAYS: int = 14

    # Scheduled sweep
    SWEEP_DEDUPE_MODE: str = "cooldown"  # none | once | cooldown
    SWEEP_DEDUPE_COOLDOWN_HOURS: int = 24
    SWEEP_INCLUDE_MISSED_DEADLINE: bool = True

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def email_dry_run(self) -> bool:
        return not self.RESEND_API_KEY


settings = Settings()
