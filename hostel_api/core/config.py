from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    # If DEV and you hit SSL cert issues on Windows, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    # Roster store, only consulted when SIGNUP_MODE == "roster"
    REDIS_URL: str | None = None

    SIGNUP_MODE: Literal["profile", "roster"] = "roster"
    PROFILE_UPDATE_MODE: Literal["fixed", "dynamic"] = "dynamic"

    BCRYPT_ROUNDS: int = 10

    # Return raw failure text in 500 responses. Development only.
    EXPOSE_DB_ERRORS: bool = False

    INIT_DB_ON_STARTUP: bool = False
    ENABLE_DOCS: bool = False
    LOG_LEVEL: str = "INFO"
    ENV: str = "dev"  # "dev" or "prod"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()

# Sent on every response, including the bare preflight answer
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}
