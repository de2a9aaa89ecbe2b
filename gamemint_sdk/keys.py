"""
Keypair and key helpers.

Signing is done by ``solders`` keypairs; this module only produces them and
normalizes the different ways a 32-byte identity key can be passed around.
"""
import json
import logging
import os
from pathlib import Path
from typing import List, Union

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .exceptions import EncodingPreconditionError, KeypairError
from .models import KEY_LENGTH

logger = logging.getLogger(__name__)

KeyLike = Union[bytes, bytearray, str, Pubkey, Keypair]

KEYPAIR_ENV_VAR = "GAMEMINT_KEYPAIR"


def generate_keypair() -> Keypair:
    """
    Generate a fresh Ed25519 keypair.

    Returns:
        New solders Keypair
    """
    keypair = Keypair()
    logger.debug(f"Generated keypair {keypair.pubkey()}")
    return keypair


def _keypair_from_ints(values: List[int]) -> Keypair:
    if not isinstance(values, list) or len(values) != 64:
        raise KeypairError("Keypair must be a JSON array of 64 integers")
    try:
        return Keypair.from_bytes(bytes(values))
    except (ValueError, TypeError) as e:
        raise KeypairError(f"Invalid keypair bytes: {e}") from e


def load_keypair(path: Union[str, Path]) -> Keypair:
    """
    Load a keypair file in the Solana CLI format (JSON array of 64 ints).

    Args:
        path: Path to the keypair file, ``~`` is expanded

    Returns:
        Loaded Keypair

    Raises:
        KeypairError: If the file is missing or malformed
    """
    path = Path(path).expanduser()
    try:
        with open(path, "r") as f:
            values = json.load(f)
    except FileNotFoundError as e:
        raise KeypairError(f"Keypair file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise KeypairError(f"Keypair file is not valid JSON: {path}") from e

    keypair = _keypair_from_ints(values)
    logger.info(f"Loaded keypair {keypair.pubkey()} from {path}")
    return keypair


def keypair_from_env(var: str = KEYPAIR_ENV_VAR) -> Keypair:
    """
    Load a keypair from an environment variable.

    The variable holds either a path to a keypair file or the JSON array itself.

    Raises:
        KeypairError: If the variable is unset or its value is not a keypair
    """
    value = os.environ.get(var)
    if not value:
        raise KeypairError(f"{var} environment variable is not set")

    value = value.strip()
    if value.startswith("["):
        try:
            return _keypair_from_ints(json.loads(value))
        except json.JSONDecodeError as e:
            raise KeypairError(f"{var} does not contain a valid JSON keypair") from e
    return load_keypair(value)


def to_key_bytes(value: KeyLike) -> bytes:
    """
    Coerce an identity key into its raw 32 bytes.

    Args:
        value: Raw bytes, base58 string, Pubkey or Keypair (its public key is used)

    Returns:
        32 key bytes

    Raises:
        EncodingPreconditionError: If the value is not a 32-byte key
    """
    if isinstance(value, Keypair):
        return bytes(value.pubkey())
    if isinstance(value, Pubkey):
        return bytes(value)
    if isinstance(value, str):
        try:
            raw = base58.b58decode(value)
        except ValueError as e:
            raise EncodingPreconditionError(f"Key is not valid base58: {value!r}") from e
    elif isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raise EncodingPreconditionError(
            f"Key must be bytes, str, Pubkey or Keypair, got {type(value).__name__}"
        )

    if len(raw) != KEY_LENGTH:
        raise EncodingPreconditionError(
            f"Key must be exactly {KEY_LENGTH} bytes, got {len(raw)}"
        )
    return raw


def to_pubkey(value: KeyLike) -> Pubkey:
    """Coerce an identity key into a Pubkey"""
    return Pubkey(to_key_bytes(value))
