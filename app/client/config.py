from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    api_base_url: str = "http://localhost:5001/api"
    books_api_url: str = "https://www.googleapis.com/books/v1"
    books_api_key: str | None = None
    timeout_seconds: float = 15.0
    session_path: Path | None = None

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="BOOKSHOP_CLIENT_", extra="ignore")


client_settings = ClientSettings()
