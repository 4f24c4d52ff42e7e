"""
Configuration
=============

Everything the ingest service needs to know at startup, loaded once from
environment variables (a `.env` file is picked up by python-dotenv).

Environment Variables:
    INGEST_API_KEY: Shared secret the device sends in `X-API-Key`
    INGEST_PATH: Path of the ingest endpoint (default: /ingest)
    DB_DRIVER: SQLAlchemy dialect+driver (default: mysql+pymysql)
    DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASS: Database connection
    DB_TABLE: Table the readings go into (default: leituras)
    DATABASE_URL: Full SQLAlchemy URL, overrides the DB_* parts
    DB_POOL_RECYCLE: Seconds before a pooled connection is recycled
    EXPOSE_ERROR_DETAILS: Put database error text in 500 responses (debug only!)
    LOG_LEVEL: Logging level (default: INFO)

Defaults are set for local development against a MySQL on 127.0.0.1.

Author: Sensor Ingest Team
"""

import os
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import URL, make_url


# The key the firmware ships with. Anything still using it is not secured.
DEFAULT_API_KEY = "troque_esta_chave"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,63}$")
_TRUTHY = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Config:
    """
    Static settings for one process.

    Built once (usually with `Config.from_env()`) and handed to `create_app()`.
    Frozen so nothing can change the API key or credentials while serving.
    """

    api_key: str = DEFAULT_API_KEY
    ingest_path: str = "/ingest"

    db_driver: str = "mysql+pymysql"
    db_host: str = "127.0.0.1"
    db_port: int = 3306
    db_name: str = "sensores"
    db_user: str = "root"
    db_password: str = ""
    db_table: str = "leituras"
    database_url: Optional[str] = None
    db_pool_recycle: int = 3600

    expose_error_details: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.api_key or not self.api_key.strip():
            raise ValueError("INGEST_API_KEY must not be empty")
        if not self.ingest_path.startswith("/"):
            raise ValueError(f"INGEST_PATH must start with '/', got {self.ingest_path!r}")
        if not _IDENTIFIER.match(self.db_table):
            raise ValueError(f"DB_TABLE is not a valid table name: {self.db_table!r}")
        if not 0 < self.db_port < 65536:
            raise ValueError(f"DB_PORT out of range: {self.db_port}")

    @classmethod
    def from_env(cls) -> "Config":
        """Read every setting from the environment, falling back to the defaults."""
        return cls(
            api_key=os.getenv("INGEST_API_KEY", DEFAULT_API_KEY).strip(),
            ingest_path=os.getenv("INGEST_PATH", "/ingest"),
            db_driver=os.getenv("DB_DRIVER", "mysql+pymysql"),
            db_host=os.getenv("DB_HOST", "127.0.0.1"),
            db_port=_env_int("DB_PORT", 3306),
            db_name=os.getenv("DB_NAME", "sensores"),
            db_user=os.getenv("DB_USER", "root"),
            db_password=os.getenv("DB_PASS", ""),
            db_table=os.getenv("DB_TABLE", "leituras"),
            database_url=os.getenv("DATABASE_URL") or None,
            db_pool_recycle=_env_int("DB_POOL_RECYCLE", 3600),
            expose_error_details=_env_bool("EXPOSE_ERROR_DETAILS", False),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def uses_default_api_key(self) -> bool:
        return self.api_key == DEFAULT_API_KEY

    def sqlalchemy_url(self) -> URL:
        """
        Build the database URL.

        MySQL connections always ask for utf8mb4 so device names can hold any
        Unicode character.
        """
        if self.database_url:
            return make_url(self.database_url)

        query = {"charset": "utf8mb4"} if self.db_driver.startswith("mysql") else {}
        return URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query=query,
        )

    def __repr__(self) -> str:
        """String representation (hides the API key and password)."""
        return (
            f"Config(ingest_path='{self.ingest_path}', "
            f"db='{self.sqlalchemy_url().render_as_string(hide_password=True)}', "
            f"table='{self.db_table}', "
            f"expose_error_details={self.expose_error_details}, "
            f"log_level='{self.log_level}')"
        )
