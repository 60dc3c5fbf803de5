"""Environment-driven settings for the todo API."""

import os

ENV = os.getenv("TODO_API_ENV", "development")


def is_production() -> bool:
    return ENV == "production"


def is_development() -> bool:
    return ENV == "development"


HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text" if is_development() else "json")

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

API_VERSION = os.getenv("API_VERSION", "v1")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
