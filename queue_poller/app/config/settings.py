from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    broker_host: str = Field(..., validation_alias="BROKER_HOST")
    broker_port: int = Field(5672, validation_alias="BROKER_PORT")
    broker_user: str = Field(..., validation_alias="BROKER_USER")
    broker_password: str = Field(..., validation_alias="BROKER_PASSWORD")
    broker_vhost: str = Field("/", validation_alias="BROKER_VHOST")

    queue_name: str = Field(..., validation_alias="QUEUE_NAME")
    queue_max_length: PositiveInt | None = Field(None, validation_alias="QUEUE_MAX_LENGTH")
    queue_durable: bool = Field(True, validation_alias="QUEUE_DURABLE")
    prefetch_count: PositiveInt = Field(10, validation_alias="PREFETCH_COUNT")

    # Seconds between polls and optional cap on messages drained per poll (unset = until empty).
    poll_interval_seconds: PositiveFloat = Field(1.0, validation_alias="POLL_INTERVAL_SECONDS")
    poll_max_messages: PositiveInt | None = Field(None, validation_alias="POLL_MAX_MESSAGES")

    queue_backend: str = Field("rabbitmq", validation_alias="QUEUE_BACKEND")
    scheduler_backend: str = Field("asyncio", validation_alias="SCHEDULER_BACKEND")
