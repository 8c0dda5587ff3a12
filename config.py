import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./users.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    DEFAULT_LANGUAGE = data.get("DEFAULT_LANGUAGE", "en")

    # Adapters
    CACHE_BACKEND = data.get("CACHE_BACKEND", "memory")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    EMAIL_BACKEND = data.get("EMAIL_BACKEND", "console")

    # Tokens (secrets must be >= 32 chars and differ)
    ACCESS_TOKEN_SECRET = data.get("ACCESS_TOKEN_SECRET", "dev-access-secret-change-in-production-0001")
    ACCESS_TOKEN_ALGORITHM = data.get("ACCESS_TOKEN_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES_IN = data.get("ACCESS_TOKEN_EXPIRES_IN", 900)
    REFRESH_TOKEN_SECRET = data.get("REFRESH_TOKEN_SECRET", "dev-refresh-secret-change-in-production-0002")
    REFRESH_TOKEN_ALGORITHM = data.get("REFRESH_TOKEN_ALGORITHM", "HS256")
    REFRESH_TOKEN_EXPIRATION_DAYS = data.get("REFRESH_TOKEN_EXPIRATION_DAYS", 7)

    # Passwords
    PASSWORD_RESET_TOKEN_VALIDITY_HOURS = data.get("PASSWORD_RESET_TOKEN_VALIDITY_HOURS", 1)
    BCRYPT_ROUNDS = data.get("BCRYPT_ROUNDS", 12)

    # Links sent by email
    APP_LOGIN_URL = data.get("APP_LOGIN_URL", "http://localhost:3000/login")
    PASSWORD_RESET_URL = data.get("PASSWORD_RESET_URL", "http://localhost:3000/reset-password")
