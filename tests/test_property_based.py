"""
Property-based tests for the instruction codec.

These tests verify that properties hold true across many random inputs.
"""
from hypothesis import given, settings, strategies as st

from gamemint_sdk.codec import (
    decode_contract_state,
    decode_key,
    encode_grant_permission,
    encode_initialize,
    encode_mint,
)

key_strategy = st.binary(min_size=32, max_size=32)
# Lone surrogates cannot be UTF-8 encoded
text_strategy = st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=64)


@settings(max_examples=100)
@given(key=key_strategy)
def test_initialize_key_round_trip(key):
    assert decode_key(encode_initialize(key)) == key


@settings(max_examples=100)
@given(key=key_strategy, game_id=text_strategy, token_uri=text_strategy)
def test_grant_permission_is_plain_concatenation(key, game_id, token_uri):
    data = encode_grant_permission(key, game_id, token_uri)

    assert data[0] == 1
    assert decode_key(data) == key
    assert data[33:] == game_id.encode("utf-8") + token_uri.encode("utf-8")
    assert data == encode_grant_permission(key, game_id, token_uri)


@settings(max_examples=100)
@given(key=key_strategy, game_id=text_strategy)
def test_mint_length(key, game_id):
    data = encode_mint(key, game_id)
    assert len(data) == 33 + len(game_id.encode("utf-8"))


@settings(max_examples=100)
@given(owner=key_strategy, counter=st.integers(min_value=0, max_value=2**64 - 1))
def test_contract_state_decodes_fields(owner, counter):
    state = decode_contract_state(owner + counter.to_bytes(8, "little"))
    assert state.contract_owner == owner
    assert state.last_token_id == counter
