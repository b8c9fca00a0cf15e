# tubely/config/database.py
import os
from dataclasses import dataclass
from typing import Optional
from tubely.config.base import BaseConfig


@dataclass
class PostgresConfig(BaseConfig):
    """PostgreSQL connection parts, used when DATABASE_URL is not set"""
    db_name: str = "tubely"
    db_user: str = "tubely"
    db_password: str = ""
    db_host: str = "localhost"
    db_port: str = "5432"
    db_sslmode: str = "disable"

    @classmethod
    def from_env(cls) -> 'PostgresConfig':
        return cls(
            db_name=os.getenv('DB_NAME', cls.db_name),
            db_user=os.getenv('DB_USER', cls.db_user),
            db_password=os.getenv('DB_PASSWORD', cls.db_password),
            db_host=os.getenv('DB_HOST', cls.db_host),
            db_port=os.getenv('DB_PORT', cls.db_port),
            db_sslmode=os.getenv('DB_SSLMODE', cls.db_sslmode),
        )

    @property
    def connection_string(self) -> str:
        """Generate PostgreSQL connection string"""
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}?sslmode={self.db_sslmode}"


@dataclass
class DatabaseConfig(BaseConfig):
    """Video metadata store configuration"""
    url: Optional[str] = None
    postgres: PostgresConfig = None
    connection_timeout: int = 30
    max_connections: int = 20
    echo: bool = False

    def __post_init__(self):
        if self.postgres is None:
            self.postgres = PostgresConfig.from_env()

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        return cls(
            url=cls.get_env_optional('DATABASE_URL'),
            postgres=PostgresConfig.from_env(),
            connection_timeout=cls.get_env_int('DB_CONNECTION_TIMEOUT', 30),
            max_connections=cls.get_env_int('DB_MAX_CONNECTIONS', 20),
            echo=cls.get_env_bool('DB_ECHO', False),
        )

    @property
    def connection_string(self) -> str:
        """DATABASE_URL wins over the individual Postgres settings"""
        if self.url:
            return self.url
        return self.postgres.connection_string

    @property
    def is_sqlite(self) -> bool:
        return self.connection_string.startswith("sqlite")
