"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    DATABASE_URL: str
    SQL_ECHO: bool
    LOG_LEVEL: str
    DEFAULT_PAGE_SIZE: int
    MAX_PAGE_SIZE: int
    CSRF_COOKIE_NAME: str
    CSRF_HEADER_NAME: str
    ALLOW_DEV_CORS: bool

    def __init__(self):
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'app.db'}")
        self.SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
        self.MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
        self.CSRF_COOKIE_NAME = os.getenv("CSRF_COOKIE_NAME", "XSRF-TOKEN")
        self.CSRF_HEADER_NAME = os.getenv("CSRF_HEADER_NAME", "X-XSRF-TOKEN")
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self._validate()

    def _validate(self):
        if self.MAX_PAGE_SIZE < 1:
            raise RuntimeError("MAX_PAGE_SIZE must be at least 1")
        if not 1 <= self.DEFAULT_PAGE_SIZE <= self.MAX_PAGE_SIZE:
            raise RuntimeError("DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE")


settings = Settings()
