from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./ruralcare.db",
        env="DATABASE_URL",
    )

    # Auth
    jwt_secret_key: str = Field(default="change-me-in-production", env="JWT_SECRET_KEY")
    bcrypt_rounds: int = Field(default=10, env="BCRYPT_ROUNDS")
    admin_username: str = Field(default="admin", env="ADMIN_USERNAME")
    # Plaintext or a bcrypt hash; both are accepted by the credential verifier
    admin_password: str = Field(default="01", env="ADMIN_PASSWORD")

    # AWS Bedrock (AI interpretation helper)
    aws_access_key_id: str = Field(default="", env="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(default="", env="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field(default="us-east-1", env="AWS_REGION")
    aws_bedrock_model_id: str = Field(
        default="us.anthropic.claude-sonnet-4-5-20250929-v1:0",
        env="AWS_BEDROCK_MODEL_ID",
    )

    # File uploads
    upload_dir: str = Field(default="./uploads", env="UPLOAD_DIR")

    # SMTP reminders
    smtp_host: str = Field(default="smtp.gmail.com", env="SMTP_HOST")
    smtp_port: int = Field(default=587, env="SMTP_PORT")
    smtp_user: str = Field(default="", env="SMTP_USER")
    smtp_password: str = Field(default="", env="SMTP_PASSWORD")
    from_email: str = Field(default="", env="FROM_EMAIL")

    # Startup
    seed_demo_data: bool = Field(default=True, env="SEED_DEMO_DATA")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
