"""
Instruction payload encoding and contract state decoding.

Instruction payloads are a one-byte opcode followed by the fields of that
opcode, laid out back to back:

    0x00  [opcode:1][owner:32]
    0x01  [opcode:1][user:32][game_id:utf8][token_uri:utf8]
    0x02  [opcode:1][receiver:32][game_id:utf8]
    0x03  [opcode:1][token_id:u64][owner:32][receiver:32]
    0x04  [opcode:1][token_id:u64]

Keys and integers are fixed width. Strings are raw UTF-8 with no length
prefix or separator; the program reads a string as the whole remainder of
the payload, so a string boundary is only known to the program side.

The contract account is Borsh serialized as ``[contract_owner:32][last_token_id:u64]``.
"""
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Sequence, Tuple

from borsh_construct import CStruct, U8, U64
from construct import Array, Bytes, Construct, ConstructError, SizeofError

from .exceptions import DecodeError, EncodingPreconditionError
from .keys import KeyLike, to_key_bytes
from .models import KEY_LENGTH, ContractState, MintPermission

logger = logging.getLogger(__name__)

U64_LENGTH = 8
U64_MAX = 2**64 - 1


class Opcode(IntEnum):
    """Instruction discriminants understood by the game mint program"""
    INITIALIZE = 0
    GRANT_PERMISSION = 1
    MINT = 2
    TRANSFER = 3
    BURN = 4


class FieldKind(IntEnum):
    KEY = 0
    U64 = 1
    UTF8 = 2


@dataclass(frozen=True)
class FieldSpec:
    """A single payload field; ``width`` is None for variable-length fields"""
    name: str
    kind: FieldKind

    @property
    def width(self) -> Optional[int]:
        if self.kind == FieldKind.KEY:
            return KEY_LENGTH
        if self.kind == FieldKind.U64:
            return U64_LENGTH
        return None


@dataclass(frozen=True)
class InstructionLayout:
    """Field layout following the opcode byte of one instruction variant"""
    opcode: Opcode
    fields: Tuple[FieldSpec, ...]

    @property
    def fixed_length(self) -> int:
        """Length of the payload counting only fixed-width fields (opcode included)"""
        return 1 + sum(f.width for f in self.fields if f.width is not None)

    @property
    def is_variable(self) -> bool:
        return any(f.width is None for f in self.fields)


LAYOUTS: Dict[Opcode, InstructionLayout] = {
    Opcode.INITIALIZE: InstructionLayout(Opcode.INITIALIZE, (
        FieldSpec("owner", FieldKind.KEY),
    )),
    Opcode.GRANT_PERMISSION: InstructionLayout(Opcode.GRANT_PERMISSION, (
        FieldSpec("user", FieldKind.KEY),
        FieldSpec("game_id", FieldKind.UTF8),
        FieldSpec("token_uri", FieldKind.UTF8),
    )),
    Opcode.MINT: InstructionLayout(Opcode.MINT, (
        FieldSpec("receiver", FieldKind.KEY),
        FieldSpec("game_id", FieldKind.UTF8),
    )),
    Opcode.TRANSFER: InstructionLayout(Opcode.TRANSFER, (
        FieldSpec("token_id", FieldKind.U64),
        FieldSpec("owner", FieldKind.KEY),
        FieldSpec("receiver", FieldKind.KEY),
    )),
    Opcode.BURN: InstructionLayout(Opcode.BURN, (
        FieldSpec("token_id", FieldKind.U64),
    )),
}

# Borsh schema of the contract account, in declaration order
Schema = Sequence[Tuple[str, Construct]]

CONTRACT_STATE_SCHEMA: Schema = (
    ("contract_owner", U8[KEY_LENGTH]),
    ("last_token_id", U64),
)


def _encode_field(spec: FieldSpec, value: Any) -> bytes:
    if spec.kind == FieldKind.KEY:
        try:
            return to_key_bytes(value)
        except EncodingPreconditionError as e:
            raise EncodingPreconditionError(f"{spec.name}: {e}") from e

    if spec.kind == FieldKind.U64:
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingPreconditionError(
                f"{spec.name} must be an int, got {type(value).__name__}"
            )
        if not 0 <= value <= U64_MAX:
            raise EncodingPreconditionError(f"{spec.name} out of u64 range: {value}")
        return U64.build(value)

    if not isinstance(value, str):
        raise EncodingPreconditionError(
            f"{spec.name} must be a str, got {type(value).__name__}"
        )
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingPreconditionError(f"{spec.name} is not encodable as UTF-8: {e}") from e


def encode_instruction(opcode: Opcode, **fields: Any) -> bytes:
    """
    Encode an instruction payload for the given opcode.

    Args:
        opcode: Instruction discriminant
        **fields: Field values by name, as listed in ``LAYOUTS[opcode]``

    Returns:
        Payload bytes: opcode byte followed by every field in layout order

    Raises:
        EncodingPreconditionError: If a field is missing, unexpected or malformed
    """
    try:
        layout = LAYOUTS[Opcode(opcode)]
    except ValueError as e:
        raise EncodingPreconditionError(f"Unknown opcode: {opcode}") from e

    expected = {f.name for f in layout.fields}
    missing = [f.name for f in layout.fields if f.name not in fields]
    if missing:
        raise EncodingPreconditionError(
            f"{layout.opcode.name} missing fields: {', '.join(missing)}"
        )
    unexpected = sorted(set(fields) - expected)
    if unexpected:
        raise EncodingPreconditionError(
            f"{layout.opcode.name} got unexpected fields: {', '.join(unexpected)}"
        )

    parts = [bytes([layout.opcode])]
    parts.extend(_encode_field(spec, fields[spec.name]) for spec in layout.fields)
    payload = b"".join(parts)
    logger.debug(f"Encoded {layout.opcode.name} payload ({len(payload)} bytes)")
    return payload


def encode_initialize(payer_key: KeyLike) -> bytes:
    """Encode ``[0x00] || payer_key``"""
    return encode_instruction(Opcode.INITIALIZE, owner=payer_key)


def encode_grant_permission(payer_key: KeyLike, game_id: str, token_uri: str) -> bytes:
    """
    Encode ``[0x01] || payer_key || utf8(game_id) || utf8(token_uri)``.

    No separator is written between the two strings.
    """
    return encode_instruction(
        Opcode.GRANT_PERMISSION, user=payer_key, game_id=game_id, token_uri=token_uri
    )


def encode_mint(payer_key: KeyLike, game_id: str) -> bytes:
    """Encode ``[0x02] || payer_key || utf8(game_id)``"""
    return encode_instruction(Opcode.MINT, receiver=payer_key, game_id=game_id)


def encode_transfer(token_id: int, owner_key: KeyLike, receiver_key: KeyLike) -> bytes:
    """Encode ``[0x03] || u64le(token_id) || owner_key || receiver_key``"""
    return encode_instruction(
        Opcode.TRANSFER, token_id=token_id, owner=owner_key, receiver=receiver_key
    )


def encode_burn(token_id: int) -> bytes:
    """Encode ``[0x04] || u64le(token_id)``"""
    return encode_instruction(Opcode.BURN, token_id=token_id)


def encode_mint_permission(
    permission: MintPermission, payer_key: Optional[KeyLike] = None
) -> bytes:
    """
    Encode a grant-permission payload from a MintPermission.

    Args:
        permission: Permission to grant
        payer_key: Key written into the payload (defaults to ``permission.user``)
    """
    key = payer_key if payer_key is not None else permission.user
    return encode_grant_permission(key, permission.game_id, permission.token_uri)


def decode_key(payload: bytes) -> bytes:
    """
    Return the leading 32-byte key of an instruction payload.

    Raises:
        DecodeError: If the payload is too short, has an unknown opcode, or its
            first field is not a key
    """
    if not payload:
        raise DecodeError("Empty instruction payload")
    try:
        layout = LAYOUTS[Opcode(payload[0])]
    except ValueError as e:
        raise DecodeError(f"Unknown opcode: {payload[0]}") from e

    if layout.fields[0].kind != FieldKind.KEY:
        raise DecodeError(f"{layout.opcode.name} payload does not start with a key")
    if len(payload) < 1 + KEY_LENGTH:
        raise DecodeError(
            f"Payload too short for a key: {len(payload)} bytes, need {1 + KEY_LENGTH}"
        )
    return bytes(payload[1:1 + KEY_LENGTH])


def _is_key_field(sub: Construct) -> bool:
    if isinstance(sub, Array):
        return sub.count == KEY_LENGTH and getattr(sub.subcon, "fmtstr", None) == "<B"
    if isinstance(sub, Bytes):
        return sub.length == KEY_LENGTH
    return False


def _schema_widths(schema: Schema) -> Tuple[int, int]:
    """Check the schema against ContractState and return (owner width, counter width)"""
    names = tuple(name for name, _ in schema)
    if names != ("contract_owner", "last_token_id"):
        raise DecodeError(
            f"Schema fields {names} do not match ContractState (contract_owner, last_token_id)"
        )

    for name, sub in schema:
        if not isinstance(sub, Construct):
            raise DecodeError(f"Schema field {name} is not a construct type: {sub!r}")

    try:
        widths = tuple(sub.sizeof() for _, sub in schema)
    except SizeofError as e:
        raise DecodeError(f"Schema fields must be fixed width: {e}") from e

    if not _is_key_field(schema[0][1]):
        raise DecodeError(
            f"contract_owner must be {KEY_LENGTH} bytes wide as [u8; {KEY_LENGTH}], "
            f"schema has {schema[0][1]!r} ({widths[0]} bytes)"
        )
    if getattr(schema[1][1], "fmtstr", None) != "<Q":
        raise DecodeError("last_token_id must be a little-endian u64")
    return widths[0], widths[1]


def decode_contract_state(
    raw: bytes, schema: Schema = CONTRACT_STATE_SCHEMA, strict: bool = True
) -> ContractState:
    """
    Decode a contract account blob into a ContractState.

    Args:
        raw: Account data
        schema: Borsh field schema, in declaration order
        strict: Reject bytes following the struct (Borsh semantics); set to
            False for accounts allocated larger than the struct

    Returns:
        Decoded ContractState

    Raises:
        DecodeError: If the data is shorter than the schema, has trailing bytes
            in strict mode, or the schema does not describe ContractState
    """
    owner_width, counter_width = _schema_widths(schema)
    expected = owner_width + counter_width

    raw = bytes(raw)
    if len(raw) < expected:
        raise DecodeError(f"Contract state needs {expected} bytes, got {len(raw)}")
    if strict and len(raw) > expected:
        raise DecodeError(
            f"Unexpected {len(raw) - expected} bytes after contract state"
        )

    layout = CStruct(*(name / sub for name, sub in schema))
    try:
        parsed = layout.parse(raw[:expected])
    except ConstructError as e:
        raise DecodeError(f"Failed to decode contract state: {e}") from e

    try:
        owner = bytes(parsed.contract_owner)
        return ContractState(contract_owner=owner, last_token_id=parsed.last_token_id)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Decoded contract state is invalid: {e}") from e
