"""
GameMint SDK - client for the on-chain game mint program.
"""
from .client import GameMintClient
from .codec import (
    CONTRACT_STATE_SCHEMA,
    LAYOUTS,
    Opcode,
    decode_contract_state,
    decode_key,
    encode_burn,
    encode_grant_permission,
    encode_initialize,
    encode_instruction,
    encode_mint,
    encode_mint_permission,
    encode_transfer,
)
from .config import ClusterConfig, NetworkConfig
from .exceptions import (
    AccountNotFoundError,
    CodecError,
    ConfigError,
    ConfirmationTimeoutError,
    DecodeError,
    EncodingPreconditionError,
    GameMintError,
    KeypairError,
    LedgerConnectionError,
    LedgerError,
    RpcError,
    TransactionError,
)
from .keys import generate_keypair, keypair_from_env, load_keypair, to_key_bytes, to_pubkey
from .ledger import LedgerClient
from .models import AccountSnapshot, ContractState, MintPermission, TxConfirmation
from .version import __version__

__all__ = [
    "GameMintClient",
    "LedgerClient",
    "ClusterConfig",
    "NetworkConfig",
    "Opcode",
    "LAYOUTS",
    "CONTRACT_STATE_SCHEMA",
    "encode_instruction",
    "encode_initialize",
    "encode_grant_permission",
    "encode_mint",
    "encode_transfer",
    "encode_burn",
    "encode_mint_permission",
    "decode_key",
    "decode_contract_state",
    "ContractState",
    "MintPermission",
    "TxConfirmation",
    "AccountSnapshot",
    "generate_keypair",
    "load_keypair",
    "keypair_from_env",
    "to_key_bytes",
    "to_pubkey",
    "GameMintError",
    "CodecError",
    "DecodeError",
    "EncodingPreconditionError",
    "KeypairError",
    "ConfigError",
    "LedgerError",
    "LedgerConnectionError",
    "RpcError",
    "TransactionError",
    "ConfirmationTimeoutError",
    "AccountNotFoundError",
    "__version__",
]
