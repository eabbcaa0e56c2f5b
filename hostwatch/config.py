"""Application configuration via environment variables and defaults."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global configuration loaded from environment / ``.env`` file.

    Attributes:
        log_level: Python logging level name.
        host: Bind address for the Uvicorn server.
        port: Bind port for the Uvicorn server.
        enable_reverse_dns: When ``False`` the service resolver never
            performs PTR lookups and every host is shown by address.
        worker_join_timeout: Seconds to wait for an in-flight lookup on
            shutdown.
    """

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    enable_reverse_dns: bool = True
    worker_join_timeout: float = 5.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "HOSTWATCH_",
    }


def get_settings() -> Settings:
    """Return a cached :class:`Settings` instance.

    The instance is constructed once and reused for the lifetime of the
    process.
    """
    return _settings


_settings = Settings()
