"""
LedgerClient - JSON-RPC access to the cluster.
"""
import base64
import itertools
import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import requests
from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from .config import COMMITMENT_LEVELS, ClusterConfig
from .exceptions import (
    ConfigError,
    ConfirmationTimeoutError,
    LedgerConnectionError,
    LedgerError,
    RpcError,
    TransactionError,
)
from .keys import KeyLike, to_pubkey
from .models import AccountSnapshot, TxConfirmation


class LedgerClient:
    """
    Client for the cluster's JSON-RPC API.

    This client handles:
    1. Building, signing and sending transactions for the configured program
    2. Polling signature statuses until the configured commitment is reached
    3. Fetching account data and requesting faucet airdrops

    Transactions are sent once; a failed submission is reported, never resent.
    """

    def __init__(
        self,
        config: ClusterConfig,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the LedgerClient

        Args:
            config: Cluster settings (RPC URL, program id, commitment, timeouts)
            session: Optional requests session to reuse
            logger: Optional logger instance to use for debug/info logging
        """
        self.config = config
        self.program_id = Pubkey.from_string(config.program_id)
        self.logger = logger or logging.getLogger(__name__)
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self._ids = itertools.count(1)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "LedgerClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _rpc(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Perform a JSON-RPC call and return its ``result``.

        Raises:
            LedgerConnectionError: On connection failures and HTTP errors
            RpcError: If the response carries a JSON-RPC error object
            LedgerError: If the response is not valid JSON-RPC
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        self.logger.debug(f"RPC {method}")
        try:
            response = self.session.post(
                self.config.rpc_url, json=payload, timeout=self.config.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"RPC {method} failed: {e}")
            raise LedgerConnectionError(f"RPC {method} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            self.logger.error(f"Invalid JSON response to {method}: {e}")
            raise LedgerError(f"Invalid JSON response to {method}: {e}") from e

        if not isinstance(body, dict):
            raise LedgerError(f"Unexpected response to {method}: {body!r}")

        error = body.get("error")
        if error is not None:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            data = error.get("data") if isinstance(error, dict) else None
            self.logger.error(f"RPC {method} returned error {code}: {message}")
            raise RpcError(f"{method}: {message}", code=code, data=data)

        if "result" not in body:
            raise LedgerError(f"Missing result in response to {method}: {body}")
        return body["result"]

    def get_latest_blockhash(self) -> Hash:
        """Fetch a recent blockhash at the configured commitment"""
        result = self._rpc("getLatestBlockhash", [{"commitment": self.config.commitment}])
        try:
            return Hash.from_string(result["value"]["blockhash"])
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerError(f"Malformed getLatestBlockhash result: {result}") from e

    def build_transaction(
        self,
        data: bytes,
        signers: Sequence[Keypair],
        accounts: Optional[Sequence[AccountMeta]] = None,
        recent_blockhash: Optional[Hash] = None
    ) -> Transaction:
        """
        Build and sign a single-instruction transaction for the program.

        Args:
            data: Instruction payload
            signers: Required signers; the first one pays the fee
            accounts: Instruction accounts (default: each signer, writable)
            recent_blockhash: Blockhash to sign against (default: fetched)

        Returns:
            Signed transaction
        """
        if not signers:
            raise ValueError("At least one signer is required")

        if accounts is None:
            accounts = [AccountMeta(s.pubkey(), is_signer=True, is_writable=True) for s in signers]

        instruction = Instruction(self.program_id, bytes(data), list(accounts))
        blockhash = recent_blockhash or self.get_latest_blockhash()
        message = Message.new_with_blockhash([instruction], signers[0].pubkey(), blockhash)
        return Transaction(list(signers), message, blockhash)

    def send_transaction(self, transaction: Transaction) -> str:
        """
        Send a signed transaction.

        Returns:
            Transaction signature (base58)

        Raises:
            TransactionError: If the cluster rejects the transaction
        """
        encoded = base64.b64encode(bytes(transaction)).decode("ascii")
        signature = str(transaction.signatures[0])
        try:
            result = self._rpc("sendTransaction", [
                encoded,
                {"encoding": "base64", "preflightCommitment": self.config.commitment},
            ])
        except RpcError as e:
            raise TransactionError(
                f"Transaction {signature} rejected: {e}", signature=signature, err=e.data
            ) from e

        self.logger.info(f"Transaction sent: {result}")
        return result

    def submit(
        self,
        data: bytes,
        signers: Sequence[Keypair],
        accounts: Optional[Sequence[AccountMeta]] = None,
        wait_for_confirmation: bool = True
    ) -> TxConfirmation:
        """
        Submit an instruction payload to the program.

        Args:
            data: Instruction payload produced by the codec
            signers: Required signers; the first one pays the fee
            accounts: Instruction accounts (default: each signer, writable)
            wait_for_confirmation: Poll until the configured commitment is reached

        Returns:
            Confirmation of the transaction (status unset if not waited for)

        Raises:
            TransactionError: If the transaction is rejected or fails
            ConfirmationTimeoutError: If confirmation does not arrive in time
            LedgerError: On RPC failures
        """
        self.logger.debug(f"Submitting {len(data)} byte instruction to {self.program_id}")
        transaction = self.build_transaction(data, signers, accounts)
        signature = self.send_transaction(transaction)
        if not wait_for_confirmation:
            return TxConfirmation(signature=signature)
        return self.confirm_transaction(signature)

    def get_signature_status(self, signature: str) -> Optional[Dict[str, Any]]:
        result = self._rpc("getSignatureStatuses", [[signature], {"searchTransactionHistory": False}])
        try:
            return result["value"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise LedgerError(f"Malformed getSignatureStatuses result: {result}") from e

    def confirm_transaction(
        self, signature: str, commitment: Optional[str] = None
    ) -> TxConfirmation:
        """
        Wait until a transaction reaches the given commitment.

        Args:
            signature: Transaction signature
            commitment: Target commitment (default: configured commitment)

        Returns:
            Confirmation with slot and status

        Raises:
            TransactionError: If the transaction failed on-chain
            ConfirmationTimeoutError: If ``confirm_timeout`` elapses first
            ConfigError: If the commitment level is unknown
        """
        level = commitment or self.config.commitment
        if level not in COMMITMENT_LEVELS:
            raise ConfigError(
                f"Unknown commitment '{level}', expected one of {', '.join(COMMITMENT_LEVELS)}"
            )
        target = COMMITMENT_LEVELS.index(level)
        deadline = time.monotonic() + self.config.confirm_timeout

        while True:
            status = self.get_signature_status(signature)
            if status is not None:
                if status.get("err") is not None:
                    self.logger.error(f"Transaction {signature} failed: {status['err']}")
                    raise TransactionError(
                        f"Transaction {signature} failed: {status['err']}",
                        signature=signature,
                        err=status["err"],
                    )
                reached = status.get("confirmationStatus")
                if reached in COMMITMENT_LEVELS and COMMITMENT_LEVELS.index(reached) >= target:
                    self.logger.info(f"Transaction {signature} {reached} in slot {status.get('slot')}")
                    return TxConfirmation(signature=signature, **status)

            if time.monotonic() >= deadline:
                self.logger.warning(f"Transaction {signature} not confirmed after {self.config.confirm_timeout}s")
                raise ConfirmationTimeoutError(
                    f"Transaction {signature} not confirmed within {self.config.confirm_timeout}s",
                    signature=signature,
                )
            time.sleep(self.config.poll_interval)

    def fetch_account(self, address: KeyLike) -> Optional[AccountSnapshot]:
        """
        Fetch an account.

        Args:
            address: Account address

        Returns:
            Account snapshot, or None if the account does not exist
        """
        pubkey = to_pubkey(address)
        result = self._rpc("getAccountInfo", [
            str(pubkey),
            {"encoding": "base64", "commitment": self.config.commitment},
        ])
        value = result.get("value") if isinstance(result, dict) else None
        if value is None:
            self.logger.debug(f"Account {pubkey} not found")
            return None

        try:
            data_b64, encoding = value["data"]
            if encoding != "base64":
                raise ValueError(f"unexpected encoding {encoding}")
            data = base64.b64decode(data_b64)
            return AccountSnapshot(
                address=str(pubkey),
                owner=value["owner"],
                lamports=value["lamports"],
                executable=value.get("executable", False),
                rentEpoch=value.get("rentEpoch"),
                data=data,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerError(f"Malformed getAccountInfo result for {pubkey}: {e}") from e

    def request_funds(self, address: KeyLike, lamports: int) -> str:
        """
        Request a faucet airdrop (devnet/testnet/localnet only).

        Returns:
            Airdrop transaction signature
        """
        pubkey = to_pubkey(address)
        signature = self._rpc("requestAirdrop", [str(pubkey), lamports])
        self.logger.info(f"Requested airdrop of {lamports} lamports to {pubkey}: {signature}")
        return signature
