"""
Tests for the keys module.
"""
import json

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from gamemint_sdk.exceptions import EncodingPreconditionError, KeypairError
from gamemint_sdk.keys import (
    generate_keypair,
    keypair_from_env,
    load_keypair,
    to_key_bytes,
    to_pubkey,
)

from conftest import TEST_PAYER_SEED


@pytest.fixture
def keypair():
    return Keypair.from_seed(TEST_PAYER_SEED)


def test_generate_keypair_is_unique():
    assert generate_keypair().pubkey() != generate_keypair().pubkey()


def test_load_keypair(tmp_path, keypair):
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(bytes(keypair))))

    loaded = load_keypair(path)
    assert loaded.pubkey() == keypair.pubkey()


def test_load_keypair_missing_file(tmp_path):
    with pytest.raises(KeypairError, match="not found"):
        load_keypair(tmp_path / "missing.json")


def test_load_keypair_invalid_json(tmp_path):
    path = tmp_path / "id.json"
    path.write_text("{not json")
    with pytest.raises(KeypairError, match="not valid JSON"):
        load_keypair(path)


def test_load_keypair_wrong_length(tmp_path):
    path = tmp_path / "id.json"
    path.write_text(json.dumps([1] * 32))
    with pytest.raises(KeypairError, match="64 integers"):
        load_keypair(path)


def test_keypair_from_env_inline(monkeypatch, keypair):
    monkeypatch.setenv("GAMEMINT_KEYPAIR", json.dumps(list(bytes(keypair))))
    assert keypair_from_env().pubkey() == keypair.pubkey()


def test_keypair_from_env_path(monkeypatch, tmp_path, keypair):
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(bytes(keypair))))
    monkeypatch.setenv("GAMEMINT_KEYPAIR", str(path))
    assert keypair_from_env().pubkey() == keypair.pubkey()


def test_keypair_from_env_unset(monkeypatch):
    monkeypatch.delenv("GAMEMINT_KEYPAIR", raising=False)
    with pytest.raises(KeypairError, match="not set"):
        keypair_from_env()


def test_to_key_bytes_forms(keypair):
    pubkey = keypair.pubkey()
    raw = bytes(pubkey)

    assert to_key_bytes(raw) == raw
    assert to_key_bytes(pubkey) == raw
    assert to_key_bytes(keypair) == raw
    assert to_key_bytes(str(pubkey)) == raw


def test_to_key_bytes_rejects_short_base58():
    with pytest.raises(EncodingPreconditionError, match="32 bytes"):
        to_key_bytes("3mJr7AoUXx2Wqd")


def test_to_pubkey():
    assert to_pubkey(b"\x00" * 32) == Pubkey.default()
