from functools import lru_cache

from notevault_api.config import load_settings
from notevault_api.vault import Vault


@lru_cache()
def get_settings():
    return load_settings()


@lru_cache()
def get_vault():
    settings = get_settings()
    return Vault(settings.vault_dir)
