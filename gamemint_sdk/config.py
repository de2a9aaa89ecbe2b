"""
Cluster configuration for the GameMint SDK.
"""
import importlib.resources
import json
import logging
import os
import urllib.parse
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .keys import to_key_bytes

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "devnet"
DEFAULT_PROGRAM_ID = "DRGtxC9Z1pmxgA6a4G9kQxivATjGGQ3CQWKNAfUhwUPU"
COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")


class ClusterConfig(BaseModel):
    """Connection settings handed to a LedgerClient"""
    model_config = ConfigDict(frozen=True)

    rpc_url: str
    program_id: str = DEFAULT_PROGRAM_ID
    commitment: str = "confirmed"
    timeout: float = Field(30.0, gt=0)
    confirm_timeout: float = Field(60.0, gt=0)
    poll_interval: float = Field(0.5, gt=0)
    explorer: Optional[str] = None

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        parsed = urllib.parse.urlparse(v)
        host = parsed.hostname or ""
        is_local = host in ("localhost", "127.0.0.1")
        if parsed.scheme != "https" and not (is_local and parsed.scheme == "http"):
            raise ValueError(f"rpc_url must use https:// (got: {v})")
        return v

    @field_validator("program_id")
    @classmethod
    def validate_program_id(cls, v: str) -> str:
        to_key_bytes(v)
        return v

    @field_validator("commitment")
    @classmethod
    def validate_commitment(cls, v: str) -> str:
        if v not in COMMITMENT_LEVELS:
            raise ValueError(f"commitment must be one of {', '.join(COMMITMENT_LEVELS)}")
        return v

    def explorer_url(self, signature: str) -> Optional[str]:
        """Block explorer URL for a transaction signature, if the network has one"""
        if not self.explorer:
            return None
        return self.explorer.format(signature=signature)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClusterConfig":
        """
        Build a config from environment variables.

        Reads GAMEMINT_NETWORK (bundled network name, default devnet),
        SOLANA_RPC_URL, GAMEMINT_PROGRAM_ID and GAMEMINT_COMMITMENT. Keyword
        arguments take precedence over the environment.

        Raises:
            ConfigError: If the resulting configuration is invalid
        """
        env_values = {
            "rpc_url": os.environ.get("SOLANA_RPC_URL"),
            "program_id": os.environ.get("GAMEMINT_PROGRAM_ID"),
            "commitment": os.environ.get("GAMEMINT_COMMITMENT"),
        }
        values = {k: v for k, v in env_values.items() if v}
        values.update(overrides)
        network = os.environ.get("GAMEMINT_NETWORK", DEFAULT_NETWORK)
        return NetworkConfig.cluster(network, **values)


class NetworkConfig:
    """Access to the bundled networks.json"""

    # Parsed networks.json; static package data
    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network definitions bundled with the package.

        Returns:
            Mapping of network name to its settings
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("gamemint_sdk").joinpath("networks.json")
        with resource.open("r") as f:
            cls._networks_cache = json.load(f)
        logger.debug(f"Loaded {len(cls._networks_cache)} networks")
        return cls._networks_cache

    @classmethod
    def get_network(cls, name: str) -> Dict[str, Any]:
        """
        Get the settings of a bundled network.

        Raises:
            ConfigError: If the network is unknown
        """
        networks = cls.load_networks()
        if name not in networks:
            raise ConfigError(
                f"Unknown network '{name}'. Available networks: {', '.join(sorted(networks))}"
            )
        return networks[name]

    @classmethod
    def get_rpc_url(cls, name: str) -> str:
        """
        RPC URL of a network, overridable with GAMEMINT_RPC_URL_<NAME>.
        """
        env_key = f"GAMEMINT_RPC_URL_{name.upper().replace('-', '_')}"
        override = os.environ.get(env_key)
        if override:
            logger.debug(f"Using RPC URL from {env_key}")
            return override
        return cls.get_network(name)["rpc"]

    @classmethod
    def cluster(cls, name: str, **overrides: Any) -> ClusterConfig:
        """
        Build a ClusterConfig for a bundled network.

        Args:
            name: Network name (e.g. "devnet")
            **overrides: ClusterConfig fields replacing the network defaults;
                None values are ignored

        Raises:
            ConfigError: If the network is unknown or a value is invalid
        """
        network = cls.get_network(name)
        values = {
            "rpc_url": cls.get_rpc_url(name),
            "program_id": network.get("programId", DEFAULT_PROGRAM_ID),
            "explorer": network.get("explorer"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return ClusterConfig(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration for network '{name}': {e}") from e
