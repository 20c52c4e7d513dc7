#!/usr/bin/env python3
"""
Account Decoder Module for DAMM Fee Tracker
Identifies raw account data by discriminator and decodes it with the IDL layout

No type hint is needed: the first 8 bytes of the data select the layout.
Wide integers stored as [u8; N] are kept as little-endian bytes here;
converting them is left to fee_calculator.

Version: 1.0.0
Developer: 8roku8.hl
"""

import struct
from dataclasses import dataclass, field
from typing import Any, Dict

from solders.pubkey import Pubkey

from .constants import DISCRIMINATOR_LENGTH
from .errors import MalformedAccountData, OwnershipMismatch, SchemaError, UnknownAccountType
from .schema import PRIMITIVE_SIZES

# struct formats for fixed-width primitives (little-endian)
STRUCT_FORMATS = {
    "u8": "<B", "i8": "<b",
    "u16": "<H", "i16": "<h",
    "u32": "<I", "i32": "<i",
    "u64": "<Q", "i64": "<q",
    "f32": "<f", "f64": "<d",
}


@dataclass(frozen=True)
class RawAccount:
    """Account bytes plus the program that owns them"""
    address: str
    data: bytes
    owner: str


@dataclass(frozen=True)
class DecodedRecord:
    """Decoded account: IDL type name plus named field values"""
    type_name: str
    address: str
    fields: Dict[str, Any] = field(default_factory=dict)

    def has_field(self, name):
        return name in self.fields

    def get(self, name, default=None):
        return self.fields.get(name, default)

    def __getitem__(self, name):
        return self.fields[name]


def resolve_account_type(raw_account, registry, expected_owner):
    """Return the AccountType whose discriminator matches the account data"""
    if str(raw_account.owner) != str(expected_owner):
        raise OwnershipMismatch(raw_account.address, str(expected_owner), str(raw_account.owner))

    data = raw_account.data
    if len(data) < DISCRIMINATOR_LENGTH:
        raise MalformedAccountData(
            raw_account.address,
            f"{len(data)} bytes is shorter than the {DISCRIMINATOR_LENGTH}-byte discriminator",
        )

    tag = bytes(data[:DISCRIMINATOR_LENGTH])
    for account_type in registry.account_types():
        if account_type.discriminator == tag:
            return account_type

    raise UnknownAccountType(raw_account.address, tag)


class _Reader:
    """Sequential little-endian reader over account data"""

    def __init__(self, data, address, offset=0):
        self.data = bytes(data)
        self.address = address
        self.offset = offset

    def take(self, size, path):
        end = self.offset + size
        if end > len(self.data):
            raise MalformedAccountData(
                self.address,
                f"field '{path}' needs {size} bytes at offset {self.offset}, "
                f"only {len(self.data) - self.offset} left",
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def length_prefix(self, path):
        return struct.unpack("<I", self.take(4, path))[0]


class RecordDecoder:
    """Walks an account layout over raw bytes (Borsh encoding)"""

    def __init__(self, registry):
        self.registry = registry

    def decode(self, raw_account, account_type):
        reader = _Reader(raw_account.data, raw_account.address, offset=DISCRIMINATOR_LENGTH)
        values = self._read_fields(reader, account_type.fields, account_type.name)
        # Trailing bytes (padding / reserved space) are ignored
        return DecodedRecord(type_name=account_type.name, address=raw_account.address, fields=values)

    def _read_fields(self, reader, fields, path):
        values = {}
        for field_def in fields:
            values[field_def.name] = self._read(reader, field_def.type, f"{path}.{field_def.name}")
        return values

    def _read(self, reader, type_node, path):
        if isinstance(type_node, str):
            return self._read_primitive(reader, type_node, path)

        key, value = next(iter(type_node.items()))

        if key == "array":
            inner, length = value
            if inner == "u8":
                # Wide integers ([u8; 32]) stay as raw LE bytes
                return reader.take(length, path)
            return [self._read(reader, inner, f"{path}[{i}]") for i in range(length)]

        if key == "vec":
            length = reader.length_prefix(path)
            if value == "u8":
                return reader.take(length, path)
            return [self._read(reader, value, f"{path}[{i}]") for i in range(length)]

        if key == "option":
            flag = reader.take(1, path)[0]
            return self._read(reader, value, path) if flag else None

        if key == "coption":
            flag = reader.length_prefix(path)
            return self._read(reader, value, path) if flag else None

        if key == "defined":
            return self._read_defined(reader, value, path)

        raise SchemaError(f"Unsupported type node {type_node!r} at {path}")

    def _read_primitive(self, reader, name, path):
        if name in STRUCT_FORMATS:
            return struct.unpack(STRUCT_FORMATS[name], reader.take(PRIMITIVE_SIZES[name], path))[0]
        if name in ("u128", "u256"):
            return int.from_bytes(reader.take(PRIMITIVE_SIZES[name], path), "little")
        if name in ("i128", "i256"):
            return int.from_bytes(reader.take(PRIMITIVE_SIZES[name], path), "little", signed=True)
        if name == "bool":
            return reader.take(1, path)[0] != 0
        if name == "pubkey":
            return str(Pubkey.from_bytes(reader.take(32, path)))
        if name == "string":
            raw = reader.take(reader.length_prefix(path), path)
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedAccountData(reader.address, f"field '{path}' is not valid UTF-8: {e}") from e
        if name == "bytes":
            return reader.take(reader.length_prefix(path), path)
        raise SchemaError(f"Unsupported primitive '{name}' at {path}")

    def _read_defined(self, reader, name, path):
        type_def = self.registry.get_type(name)

        if type_def.kind == "struct":
            return self._read_fields(reader, type_def.fields, path)

        if type_def.kind == "alias":
            return self._read(reader, type_def.fields[0].type, path)

        # Enum: u8 variant index followed by the variant's fields
        index = reader.take(1, path)[0]
        if index >= len(type_def.variants):
            raise MalformedAccountData(
                reader.address,
                f"field '{path}' has variant index {index} but {name} has {len(type_def.variants)} variants",
            )
        variant = type_def.variants[index]
        result = {"variant": variant.name}
        result.update(self._read_fields(reader, variant.fields, f"{path}::{variant.name}"))
        return result


def decode_account(raw_account, account_type, registry):
    """Decode raw account data with the layout of an already resolved type"""
    return RecordDecoder(registry).decode(raw_account, account_type)


def decode_unknown_account(raw_account, registry, expected_owner):
    """Resolve the account type from its discriminator, then decode it"""
    account_type = resolve_account_type(raw_account, registry, expected_owner)
    return decode_account(raw_account, account_type, registry)
