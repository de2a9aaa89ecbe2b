"""
Data models for the GameMint SDK.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from solders.pubkey import Pubkey

KEY_LENGTH = 32


def _check_key(value: bytes) -> bytes:
    if len(value) != KEY_LENGTH:
        raise ValueError(f"key must be exactly {KEY_LENGTH} bytes, got {len(value)}")
    return value


class ContractState(BaseModel):
    """Contract account state: owner key followed by the last minted token id"""
    model_config = ConfigDict(frozen=True)

    contract_owner: bytes
    last_token_id: int = Field(..., ge=0, lt=2**64)

    @field_validator("contract_owner")
    @classmethod
    def validate_owner(cls, v: bytes) -> bytes:
        return _check_key(v)

    @classmethod
    def default(cls) -> "ContractState":
        return cls(contract_owner=bytes(KEY_LENGTH), last_token_id=0)

    @property
    def owner_pubkey(self) -> Pubkey:
        return Pubkey(self.contract_owner)


class MintPermission(BaseModel):
    """Permission for a user to mint a token for a game"""
    model_config = ConfigDict(frozen=True)

    user: bytes
    game_id: str
    token_uri: str

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: bytes) -> bytes:
        return _check_key(v)


class TxConfirmation(BaseModel):
    """Confirmation status of a submitted transaction"""
    signature: str
    slot: Optional[int] = None
    confirmation_status: Optional[str] = Field(None, alias="confirmationStatus")
    confirmations: Optional[int] = None
    err: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)


class AccountSnapshot(BaseModel):
    """Account as returned by getAccountInfo, with data decoded from base64"""
    address: str
    owner: str
    lamports: int
    executable: bool = False
    rent_epoch: Optional[int] = Field(None, alias="rentEpoch")
    data: bytes

    model_config = ConfigDict(populate_by_name=True)
