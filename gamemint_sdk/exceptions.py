"""
Exceptions for the GameMint SDK.
"""
from typing import Any, Optional


class GameMintError(Exception):
    """Base exception for all GameMint SDK errors"""
    pass


class CodecError(GameMintError):
    """Raised when an instruction payload or account blob cannot be processed"""
    pass


class DecodeError(CodecError):
    """Raised when account bytes do not match the declared schema"""
    pass


class EncodingPreconditionError(CodecError, ValueError):
    """Raised when an argument cannot be placed into an instruction payload"""
    pass


class KeypairError(GameMintError, ValueError):
    """Raised when a keypair cannot be loaded"""
    pass


class ConfigError(GameMintError, ValueError):
    """Raised when cluster configuration is missing or invalid"""
    pass


class LedgerError(GameMintError):
    """Base exception for ledger (RPC) errors"""
    pass


class LedgerConnectionError(LedgerError):
    """Raised when the RPC endpoint cannot be reached or answers with HTTP errors"""
    pass


class RpcError(LedgerError):
    """Raised when the RPC endpoint returns a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        self.code = code
        self.data = data
        super().__init__(message)


class TransactionError(LedgerError):
    """Raised when a transaction is rejected or fails on-chain."""

    def __init__(self, message: str, signature: Optional[str] = None, err: Any = None):
        self.signature = signature
        self.err = err
        super().__init__(message)


class ConfirmationTimeoutError(TransactionError):
    """Raised when a transaction does not reach the requested commitment in time"""
    pass


class AccountNotFoundError(LedgerError):
    """Raised when an account does not exist on the ledger."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Account not found: {address}")
