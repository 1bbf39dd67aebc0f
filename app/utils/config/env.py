from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "bookshop"
    environment: str = "local"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 5001
    cors_origins: list[str] = ["*"]

    mongo_uri: str | None = None
    mongo_scheme: str = "mongodb"
    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "bookshop"
    mongo_password: str | None = None
    mongo_params: str | None = None
    mongo_user: str | None = None

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str
    access_token_expires_days: int = 30
    password_hash_rounds: int = 12

    user_id_max_attempts: int = 10
    voucher_code_bytes: int = 4
    voucher_code_max_attempts: int = 10
    voucher_validity_days: int | None = None

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="BOOKSHOP_", extra="ignore")

    @property
    def connection_uri(self) -> str:
        if self.mongo_uri:
            return self.mongo_uri
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        host = self.mongo_host if self.mongo_scheme == "mongodb+srv" else f"{self.mongo_host}:{self.mongo_port}"
        params = f"?{self.mongo_params}" if self.mongo_params else ""
        return f"{self.mongo_scheme}://{auth}{host}/{self.mongo_db}{params}"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()
