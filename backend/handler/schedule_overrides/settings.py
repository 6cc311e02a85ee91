import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    admin_key: Optional[str] = None
    table_name: str = ""
    store_name: str = "overrides"
    log_level: str = "INFO"

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_key)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    log_level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    return Settings(
        admin_key=env.get("ADMIN_KEY") or None,
        table_name=env.get("TABLE_NAME", ""),
        store_name=env.get("STORE_NAME") or "overrides",
        # unknown names fall back to INFO
        log_level=log_level if log_level in LOG_LEVELS else "INFO",
    )
