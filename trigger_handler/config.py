from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Trigger handler settings loaded from environment."""

    # Service
    service_name: str = "dynamodb-trigger-handler"
    log_level: str = "INFO"

    # AWS
    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None  # For LocalStack

    # Stream
    expected_event_source: str = "aws:dynamodb"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
