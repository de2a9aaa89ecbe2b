"""
Pytest fixtures for the GameMint SDK tests.
"""
import base64
import time

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature

from gamemint_sdk.config import ClusterConfig, NetworkConfig
from gamemint_sdk.ledger import LedgerClient

# Constants for testing
TEST_RPC_URL = "https://rpc.example.com"
TEST_PROGRAM_ID = "DRGtxC9Z1pmxgA6a4G9kQxivATjGGQ3CQWKNAfUhwUPU"
TEST_PAYER_SEED = bytes([1] * 32)
TEST_BLOCKHASH = str(Hash(bytes([7] * 32)))
TEST_KEY = b"\xaa" * 32


# Make time.sleep instantaneous so confirmation polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _reset_network_cache():
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def payer():
    return Keypair.from_seed(TEST_PAYER_SEED)


@pytest.fixture
def cluster_config():
    return ClusterConfig(rpc_url=TEST_RPC_URL, program_id=TEST_PROGRAM_ID, confirm_timeout=5)


@pytest.fixture
def ledger(cluster_config):
    client = LedgerClient(cluster_config)
    yield client
    client.close()


class FakeRpc:
    """
    JSON-RPC endpoint served through requests_mock.

    ``results`` maps a method name to its result, or to a callable taking the
    params and returning the result. Unknown methods answer with a JSON-RPC
    "method not found" error.
    """

    def __init__(self):
        self.results = {
            "getLatestBlockhash": {
                "context": {"slot": 100},
                "value": {"blockhash": TEST_BLOCKHASH, "lastValidBlockHeight": 200},
            },
            "getSignatureStatuses": {
                "context": {"slot": 101},
                "value": [{
                    "slot": 101,
                    "confirmations": None,
                    "err": None,
                    "confirmationStatus": "confirmed",
                }],
            },
        }
        self.calls = []

    def __call__(self, request, context):
        body = request.json()
        method, params = body["method"], body.get("params", [])
        self.calls.append((method, params))
        if method not in self.results:
            return {"jsonrpc": "2.0", "id": body["id"],
                    "error": {"code": -32601, "message": "Method not found"}}
        result = self.results[method]
        if callable(result):
            result = result(params)
        return {"jsonrpc": "2.0", "id": body["id"], "result": result}

    def methods(self):
        return [method for method, _ in self.calls]

    def params(self, method):
        return [params for m, params in self.calls if m == method]

    def set_account(self, data: bytes, owner: str = TEST_PROGRAM_ID):
        self.results["getAccountInfo"] = {
            "context": {"slot": 102},
            "value": {
                "data": [base64.b64encode(data).decode("ascii"), "base64"],
                "executable": False,
                "lamports": 1461600,
                "owner": owner,
                "rentEpoch": 18446744073709551615,
            },
        }

    def send_signature(self, params):
        # The signature is the first 64 bytes after the compact signature count
        raw = base64.b64decode(params[0])
        return str(Signature.from_bytes(raw[1:65]))


@pytest.fixture
def rpc(requests_mock):
    fake = FakeRpc()
    fake.results["sendTransaction"] = fake.send_signature
    requests_mock.post(TEST_RPC_URL, json=fake)
    return fake
