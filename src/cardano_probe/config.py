"""
Environment configuration for the probe.

Configuration is read exactly once at startup. Missing or malformed values
raise ConfigurationError before any network activity happens.
"""

from __future__ import annotations
import os
import re
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional

from dotenv import load_dotenv
from pycardano import Network
from pydantic import BaseModel, Field, StrictStr, ValidationError, ValidationInfo, field_validator

from .runtime.errors import ConfigurationError
from .transport.connection import ConnectionConfig


class EnvKeys(str, Enum):
    """Environment variable names."""

    OGMIOS_HOST = "OGMIOS_HOST"
    OGMIOS_PORT = "OGMIOS_PORT"
    OGMIOS_TLS = "OGMIOS_TLS"
    MNEMONIC = "MNEMONIC"
    CARDANO_NETWORK = "CARDANO_NETWORK"


NETWORKS = {
    "testnet": Network.TESTNET,
    "mainnet": Network.MAINNET,
}

# Quoted element or a run of non-comma characters
_ELEMENT_RE = re.compile(r"""('[^']*'|"[^"]*"|[^,]+)""")


def _unquote(element: str) -> str:
    if len(element) >= 2 and element[0] == element[-1] and element[0] in ("'", '"'):
        return element[1:-1]
    return element


def parse_string_to_array(value: str) -> List[str]:
    """
    Parse a delimited word list.

    Accepts ``[a, 'b', "c"]``, ``a,b,c`` and plain whitespace separated
    phrases such as ``a b c``.

    Args:
        value: Raw string from the environment

    Returns:
        List of elements with surrounding quotes removed
    """
    trimmed = value.strip()
    if trimmed.startswith("[") and trimmed.endswith("]"):
        trimmed = trimmed[1:-1]

    if "," not in trimmed:
        return [_unquote(word) for word in trimmed.split()]

    return [_unquote(match.group(0).strip()) for match in _ELEMENT_RE.finditer(trimmed)]


class EnvData(BaseModel):
    """Validated environment configuration."""

    host: StrictStr = Field(..., min_length=1, description="Ogmios host name")
    port: Optional[int] = Field(default=None, ge=1, le=65535, description="Ogmios port")
    tls: bool = Field(default=False, description="Use wss/https")
    network: Literal["testnet", "mainnet"] = Field(default="testnet")
    mnemonic: List[StrictStr] = Field(..., min_length=1, description="Mnemonic words in order")

    model_config = {"frozen": True}

    @field_validator("host", mode="before")
    @classmethod
    def strip_host(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("port", "tls", "network", mode="before")
    @classmethod
    def empty_is_unset(cls, v: Any, info: ValidationInfo) -> Any:
        """An empty variable means the default."""
        if isinstance(v, str) and not v.strip():
            return cls.model_fields[info.field_name].default
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("mnemonic")
    @classmethod
    def validate_words(cls, v: List[str]) -> List[str]:
        for position, word in enumerate(v):
            if not word.strip():
                raise ValueError(f"mnemonic word {position} is empty")
        return [word.strip() for word in v]

    @property
    def cardano_network(self) -> Network:
        return NETWORKS[self.network]

    def connection_config(self) -> ConnectionConfig:
        """Connection settings for the node session."""
        return ConnectionConfig(host=self.host, port=self.port, tls=self.tls)

    def __repr__(self) -> str:
        # Never print the mnemonic
        return (f"EnvData(host={self.host!r}, port={self.port!r}, tls={self.tls!r}, "
                f"network={self.network!r}, mnemonic=<{len(self.mnemonic)} words>)")

    __str__ = __repr__


def _error_summary(error: ValidationError) -> List[Dict[str, Any]]:
    # Drop the offending input so mnemonic words never reach the logs
    return [
        {"loc": ".".join(str(part) for part in item["loc"]), "msg": item["msg"], "type": item["type"]}
        for item in error.errors()
    ]


def load_env(environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> EnvData:
    """
    Load and validate configuration from the environment.

    Args:
        environ: Mapping to read instead of ``os.environ``
        dotenv: Load a ``.env`` file first (never overrides set variables)

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If a required value is missing or malformed
    """
    if dotenv:
        load_dotenv()
    if environ is None:
        environ = os.environ

    raw_mnemonic = environ.get(EnvKeys.MNEMONIC.value)
    raw = {
        "host": environ.get(EnvKeys.OGMIOS_HOST.value),
        "port": environ.get(EnvKeys.OGMIOS_PORT.value),
        "tls": environ.get(EnvKeys.OGMIOS_TLS.value),
        "network": environ.get(EnvKeys.CARDANO_NETWORK.value),
        "mnemonic": parse_string_to_array(raw_mnemonic) if raw_mnemonic else [],
    }
    # Unset optional variables take the model defaults
    raw = {key: value for key, value in raw.items() if value is not None}

    try:
        return EnvData.model_validate(raw)
    except ValidationError as e:
        errors = _error_summary(e)
        reason = "; ".join(f"{item['loc']}: {item['msg']}" for item in errors)
        # pydantic's own message echoes the input, which may hold the mnemonic
        raise ConfigurationError(f"Env invalid! Reason: {reason}", details={"errors": errors}) from None
