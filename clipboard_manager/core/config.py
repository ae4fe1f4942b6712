"""Runtime configuration from the environment and an optional .env file."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass
class RuntimeConfig:
    """Filesystem locations and logging level for a running instance."""

    home: str
    vault_path: str
    log_level: str = "INFO"

    @property
    def state_path(self) -> str:
        return os.path.join(self.home, "state.json")


def load_config() -> RuntimeConfig:
    """Read configuration, loading .env values first."""
    load_dotenv()

    home = os.path.expanduser(
        os.getenv("CLIPBOARD_MANAGER_HOME", "~/.clipboard-manager")
    )
    vault_path = os.path.expanduser(
        os.getenv("CLIPBOARD_MANAGER_VAULT", os.path.join(home, "vault"))
    )
    return RuntimeConfig(
        home=home,
        vault_path=vault_path,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
