"""
hacknight.config — YAML Configuration Loader
=============================================

Reads ``config.yaml`` for **non-secret** settings (community identity,
API port, streak policy, Luma endpoint).  Secrets — ``DATABASE_URL``,
``JWT_SECRET``, ``LUMA_API_KEY`` — come from the environment (``.env``).

Usage::

    from hacknight.config import load_config

    cfg = load_config()            # reads ./config.yaml by default
    print(cfg.community_name)      # "Hack Night"
    print(cfg.skip_canceled_events)  # False
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

DEFAULT_LUMA_BASE_URL = "https://public-api.luma.com"


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class HackNightConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str

    # API
    api_port: int = 8000

    # Streak policy: canceled events still break streaks unless this is set
    skip_canceled_events: bool = False

    # Luma
    luma_base_url: str = DEFAULT_LUMA_BASE_URL


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> HackNightConfig:
    """Read *path* and return a :class:`HackNightConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    streaks = raw.get("streaks") or {}
    luma = raw.get("luma") or {}

    return HackNightConfig(
        community_name=raw["community_name"],
        api_port=int(raw.get("api_port", 8000)),
        skip_canceled_events=bool(streaks.get("skip_canceled_events", False)),
        luma_base_url=str(luma.get("base_url") or DEFAULT_LUMA_BASE_URL).rstrip("/"),
    )
