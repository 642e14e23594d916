from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sqs_queue: str = "default"
    # Queue URL prefix, e.g. https://sqs.us-east-1.amazonaws.com/123456789012
    sqs_prefix: str | None = None
    aws_default_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    # Overrides the SQS broker (memory://, redis://...) for local runs and tests.
    broker_url: str | None = None

    worker_tries: int = 3
    worker_timeout: int = 300
    worker_sleep: int = 3

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api"
    log_level: str = "INFO"


settings = Settings()
