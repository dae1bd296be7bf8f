import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field

load_dotenv(find_dotenv())

DEFAULT_HOME = Path.home() / ".huelink"


class BridgeSettings(BaseModel):
    bridge_ip: str = ""
    username: str = ""
    light_block_ms: int = Field(50, ge=0)
    group_block_ms: int = Field(100, ge=0)
    other_block_ms: int = Field(200, ge=0)
    request_timeout_ms: int = Field(200, gt=0)
    home: Path = DEFAULT_HOME


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


def load_settings(**overrides) -> BridgeSettings:
    """
    Build settings from the environment (and a .env file, if one is found).
    Keyword arguments win over the environment; None values are ignored.
    """
    values = {
        "bridge_ip": os.getenv("HUE_BRIDGE_IP"),
        # APP_KEY is the older variable name for the same credential
        "username": os.getenv("HUE_USERNAME") or os.getenv("APP_KEY"),
        "light_block_ms": _env_int("HUE_LIGHT_BLOCK_MS"),
        "group_block_ms": _env_int("HUE_GROUP_BLOCK_MS"),
        "other_block_ms": _env_int("HUE_OTHER_BLOCK_MS"),
        "request_timeout_ms": _env_int("HUE_REQUEST_TIMEOUT_MS"),
        "home": os.getenv("HUELINK_HOME"),
    }
    values.update(overrides)
    return BridgeSettings(**{k: v for k, v in values.items() if v is not None})
