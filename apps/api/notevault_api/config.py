from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    vault_dir: Path
    api_auth_mode: str
    api_auth_token: str | None
    api_debug_log: bool
    log_level: str


def default_vault_dir() -> Path:
    # A frozen build keeps its data next to the binary; otherwise next to the launching script.
    if getattr(sys, "frozen", False):
        base = Path(sys.executable).resolve().parent
    else:
        base = Path(sys.argv[0] or ".").resolve().parent
    return base / "data"


def load_settings() -> Settings:
    raw_vault_dir = os.environ.get("VAULT_DIR")
    vault_dir = Path(raw_vault_dir).resolve() if raw_vault_dir else default_vault_dir()
    api_auth_mode = os.environ.get("API_AUTH_MODE", "none").lower()
    api_auth_token = os.environ.get("API_AUTH_TOKEN")
    api_debug_log = os.environ.get("API_DEBUG_LOG", "false").lower() == "true"
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    return Settings(
        vault_dir=vault_dir,
        api_auth_mode=api_auth_mode,
        api_auth_token=api_auth_token,
        api_debug_log=api_debug_log,
        log_level=log_level,
    )
