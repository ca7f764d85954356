# config.py
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _engine_options(database_uri: str, timeout: int) -> dict:
    options = {"pool_pre_ping": True}
    if database_uri.startswith("mysql"):
        options["pool_recycle"] = 280
        # PyMySQL socket timeouts; a stuck query surfaces as OperationalError
        options["connect_args"] = {
            "connect_timeout": timeout,
            "read_timeout": timeout,
            "write_timeout": timeout,
        }
    return options


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/greenstride"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    DB_TIMEOUT_SECONDS = int(os.environ.get("DB_TIMEOUT_SECONDS", 10))
    DB_RETRY_ATTEMPTS = int(os.environ.get("DB_RETRY_ATTEMPTS", 3))
    DB_RETRY_BACKOFF_SECONDS = float(os.environ.get("DB_RETRY_BACKOFF_SECONDS", 0.2))

    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI, DB_TIMEOUT_SECONDS)

    # JWT: raw token in the Authorization header, email as the identity claim
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = ""
    JWT_IDENTITY_CLAIM = "email"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    DB_RETRY_BACKOFF_SECONDS = 0
    LOG_LEVEL = "WARNING"
