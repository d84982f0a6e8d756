from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "task-manager"
    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "task_manager"
    mongo_scheme: str = "mongodb+srv"
    mongo_password: str | None = None
    mongo_user: str | None = None

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    token_expires_minutes: int | None = None
    bcrypt_rounds: int = 12

    redis_db: int = 0
    redis_port: int = 6379
    redis_host: str = "localhost"
    redis_password: str | None = None
    avatar_upload_cooldown_seconds: int = 5

    sendgrid_api_key: str | None = None
    email_from: str = "no-reply@task-manager.local"
    email_queue_enabled: bool = True

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=True)

    @property
    def mongo_uri(self) -> str:
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        if self.mongo_scheme == "mongodb+srv":
            return f"mongodb+srv://{auth}{self.mongo_host}/{self.mongo_db}?retryWrites=true&w=majority"
        return f"{self.mongo_scheme}://{auth}{self.mongo_host}:{self.mongo_port}/{self.mongo_db}"


settings = Settings()
