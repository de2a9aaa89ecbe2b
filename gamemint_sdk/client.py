"""
GameMintClient - Main client for the game mint program.
"""
import logging
from typing import Any, Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .codec import (
    decode_contract_state,
    encode_burn,
    encode_grant_permission,
    encode_initialize,
    encode_mint,
    encode_transfer,
)
from .config import NetworkConfig
from .exceptions import AccountNotFoundError
from .keys import KeyLike, to_pubkey
from .ledger import LedgerClient
from .models import ContractState, TxConfirmation

LAMPORTS_PER_SOL = 1_000_000_000


class GameMintClient:
    """
    Client for interacting with the game mint program.

    Each instruction method encodes its payload with the codec and submits it
    with the payer as the required signer. Calls are independent; a failed
    call raises and leaves ordering decisions to the caller.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        payer: Keypair,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the GameMintClient

        Args:
            ledger: LedgerClient connected to the cluster
            payer: Keypair paying fees and signing every instruction
            logger: Optional logger instance to use for debug/info logging
        """
        self.ledger = ledger
        self.payer = payer
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_network(
        cls,
        network: str,
        payer: Keypair,
        logger: Optional[logging.Logger] = None,
        **overrides: Any
    ) -> "GameMintClient":
        """
        Create a client for a bundled network.

        Args:
            network: Network name from networks.json (e.g. "devnet")
            payer: Fee payer and signer
            logger: Optional logger
            **overrides: ClusterConfig fields replacing the network defaults

        Raises:
            ConfigError: If the network is unknown or an override is invalid
        """
        config = NetworkConfig.cluster(network, **overrides)
        return cls(LedgerClient(config, logger=logger), payer, logger=logger)

    @property
    def payer_pubkey(self) -> Pubkey:
        return self.payer.pubkey()

    @property
    def program_id(self) -> Pubkey:
        return self.ledger.program_id

    def _submit(self, name: str, data: bytes) -> TxConfirmation:
        confirmation = self.ledger.submit(data, [self.payer])
        explorer = self.ledger.config.explorer_url(confirmation.signature)
        self.logger.info(f"{name} confirmed: {explorer or confirmation.signature}")
        return confirmation

    def airdrop(self, lamports: int = LAMPORTS_PER_SOL) -> TxConfirmation:
        """Fund the payer from the faucet and wait for confirmation"""
        signature = self.ledger.request_funds(self.payer_pubkey, lamports)
        return self.ledger.confirm_transaction(signature)

    def initialize_contract(self) -> TxConfirmation:
        """Initialize the contract with the payer as owner"""
        return self._submit("initialize", encode_initialize(self.payer_pubkey))

    def grant_mint_permission(
        self, game_id: str, token_uri: str, user: Optional[KeyLike] = None
    ) -> TxConfirmation:
        """
        Grant mint permission for a game.

        Args:
            game_id: Game identifier
            token_uri: Metadata URI of the token to mint
            user: Key written into the permission (default: payer)
        """
        key = user if user is not None else self.payer_pubkey
        return self._submit("grant-permission", encode_grant_permission(key, game_id, token_uri))

    def mint(self, game_id: str, receiver: Optional[KeyLike] = None) -> TxConfirmation:
        """Mint a token for a game to ``receiver`` (default: payer)"""
        key = receiver if receiver is not None else self.payer_pubkey
        return self._submit("mint", encode_mint(key, game_id))

    def transfer(self, token_id: int, owner: KeyLike, receiver: KeyLike) -> TxConfirmation:
        return self._submit("transfer", encode_transfer(token_id, owner, receiver))

    def burn(self, token_id: int) -> TxConfirmation:
        return self._submit("burn", encode_burn(token_id))

    def get_contract_state(
        self, address: Optional[KeyLike] = None, strict: bool = True
    ) -> ContractState:
        """
        Fetch and decode the contract state.

        Args:
            address: Account holding the state (default: the program id)
            strict: Reject trailing bytes after the state struct

        Returns:
            Decoded ContractState

        Raises:
            AccountNotFoundError: If the account does not exist
            DecodeError: If the account data is not a ContractState
        """
        pubkey = to_pubkey(address) if address is not None else self.program_id
        snapshot = self.ledger.fetch_account(pubkey)
        if snapshot is None:
            self.logger.error(f"Cannot find the contract account {pubkey}")
            raise AccountNotFoundError(str(pubkey))

        state = decode_contract_state(snapshot.data, strict=strict)
        self.logger.debug(f"Contract state at {pubkey}: last_token_id={state.last_token_id}")
        return state
