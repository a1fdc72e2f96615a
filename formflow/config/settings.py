"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "formflow_dev"

    # SMTP (email notifications)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_secure: bool = False  # Implicit TLS (port 465); otherwise STARTTLS when available
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_from: str = ""

    # Twilio (SMS notifications)
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""
    twilio_base_url: str = "https://api.twilio.com/2010-04-01"

    # Chat / push gateways
    slack_webhook_url: str = ""
    push_gateway_url: str = ""
    push_gateway_api_key: str = ""

    # Outbound HTTP (webhooks, integrations)
    http_timeout_seconds: float = 30.0

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"

    # CORS - set to "*" to allow all origins
    cors_origins: str = "*"

    # Public base URL of this API (used by the CLI tooling)
    api_base_url: str = "http://localhost:8000"

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def smtp_sender(self) -> Optional[str]:
        """From address for outgoing mail"""
        return self.smtp_from or self.smtp_user or None

    @property
    def missing_smtp_settings(self) -> List[str]:
        """Names of the SMTP variables required for sending that are not set"""
        required = {
            "SMTP_HOST": self.smtp_host,
            "SMTP_USER": self.smtp_user,
            "SMTP_PASS": self.smtp_pass,
        }
        return [name for name, value in required.items() if not value]

    @property
    def sms_configured(self) -> bool:
        """Check if Twilio credentials are complete"""
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_from_number)

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
