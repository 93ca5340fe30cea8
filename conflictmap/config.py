import os


def get_env_optional(name: str) -> str | None:
    val = os.getenv(name)
    return val if val else None


class Settings:
    # default metric source for the CLI when --metrics is not given
    METRICS_SOURCE: str | None = get_env_optional("CONFLICTMAP_METRICS_SOURCE")
    CATALOG_PATH: str | None = get_env_optional("CONFLICTMAP_CATALOG_PATH")

    LOG_LEVEL: str = os.getenv("CONFLICTMAP_LOG_LEVEL", "WARNING").upper()


settings = Settings()
