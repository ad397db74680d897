"""
Initializes the Dynaconf settings object for the Litmos client.
This module is the single source of truth for configuration defaults.
"""

from pathlib import Path
from dynaconf import Dynaconf

PACKAGE_ROOT = Path(__file__).parent

settings = Dynaconf(
    settings_files=[
        str(PACKAGE_ROOT / "config" / "settings.toml"),
        "config/settings.toml",
    ],
    secrets=["config/.secrets.toml"],
    merge_enabled=True,
    envvar_prefix="LITMOS",
)
