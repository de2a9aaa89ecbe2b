"""
Tests for the data models.
"""
import pytest
from pydantic import ValidationError

from gamemint_sdk.models import AccountSnapshot, ContractState, MintPermission, TxConfirmation


class TestContractState:
    """Test ContractState model and validation."""

    def test_default(self):
        state = ContractState.default()
        assert state.contract_owner == bytes(32)
        assert state.last_token_id == 0

    def test_invalid_owner_length(self):
        with pytest.raises(ValidationError) as exc_info:
            ContractState(contract_owner=b"\x00" * 31, last_token_id=0)
        assert "key must be exactly 32 bytes" in str(exc_info.value)

    @pytest.mark.parametrize("counter", [-1, 2**64])
    def test_counter_out_of_range(self, counter):
        with pytest.raises(ValidationError):
            ContractState(contract_owner=bytes(32), last_token_id=counter)

    def test_frozen(self):
        state = ContractState.default()
        with pytest.raises(ValidationError):
            state.last_token_id = 5


class TestMintPermission:
    """Test MintPermission model."""

    def test_valid(self):
        permission = MintPermission(user=b"\x01" * 32, game_id="game", token_uri="uri")
        assert permission.game_id == "game"

    def test_invalid_user(self):
        with pytest.raises(ValidationError):
            MintPermission(user=b"\x01", game_id="game", token_uri="uri")


def test_tx_confirmation_aliases():
    confirmation = TxConfirmation.model_validate({
        "signature": "sig",
        "slot": 10,
        "confirmationStatus": "finalized",
        "err": None,
    })
    assert confirmation.confirmation_status == "finalized"
    assert TxConfirmation(signature="sig", confirmation_status="processed").confirmation_status == "processed"


def test_account_snapshot_aliases():
    snapshot = AccountSnapshot(
        address="a", owner="o", lamports=1, rentEpoch=3, data=b"\x00"
    )
    assert snapshot.rent_epoch == 3
    assert snapshot.executable is False
