from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from govanity.errors import ConfigError

DEFAULT_CONFIG_PATH = "govanity.toml"
FALLBACK_PLACEHOLDER = "%"

_OCTAL_RE = re.compile(r"[0-7]+")


def parse_socket_perm(raw: str) -> int:
    """Parse an octal permission string such as "660" or "0660"."""

    if not _OCTAL_RE.fullmatch(raw):
        raise ValueError(f"invalid SocketPerm value {raw}: not an octal number")
    mode = int(raw, 8)
    if mode > 0xFFFFFFFF:
        raise ValueError(f"invalid SocketPerm value {raw}: value out of range")
    return mode


class VanityConfig(BaseModel):
    """Static server configuration, loaded once and never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    base: str = Field(default="", alias="Base")
    modules: dict[str, str] = Field(default_factory=dict, alias="Modules")
    fallback: str = Field(
        default="",
        alias="Fallback",
        description="Source URL template; every '%' is replaced by the module name.",
    )
    socket_path: str = Field(default="", alias="SocketPath")
    socket_perm: str | None = Field(default=None, alias="SocketPerm")

    @field_validator("socket_perm")
    @classmethod
    def _check_socket_perm(cls, value: str | None) -> str | None:
        if value:
            parse_socket_perm(value)
        return value or None

    @property
    def socket_mode(self) -> int | None:
        if self.socket_perm is None:
            return None
        return parse_socket_perm(self.socket_perm)


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def validate_config(config: VanityConfig) -> VanityConfig:
    if not config.socket_path:
        raise ConfigError("SocketPath is unset")
    if not config.base:
        raise ConfigError("Base is unset")
    return config


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> VanityConfig:
    """Load and validate the TOML configuration at ``path``.

    Every failure (missing file, syntax error, schema mismatch, empty required
    field) is raised as ConfigError.
    """

    config_path = Path(path)
    try:
        raw = _read_toml(config_path)
    except OSError as exc:
        raise ConfigError(f"cannot read config {config_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"cannot parse config {config_path}: {exc}") from exc

    try:
        config = VanityConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"invalid config {config_path}: {exc}") from exc

    return validate_config(config)
