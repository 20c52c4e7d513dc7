#!/usr/bin/env python3
"""
Account Schema Module for DAMM Fee Tracker
Turns an Anchor IDL into account layouts keyed by their discriminator

Both IDL generations are accepted:
  - legacy (< 0.30): account layouts live under accounts[].type
  - 0.30+:           accounts[] only carry names, layouts live under types[]

Version: 1.0.0
Developer: 8roku8.hl
"""

import hashlib
import json
import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .constants import DISCRIMINATOR_LENGTH, DISCRIMINATOR_PREFIX
from .errors import SchemaError

# Fixed-size primitives: name -> byte width
PRIMITIVE_SIZES = {
    "bool": 1,
    "u8": 1, "i8": 1,
    "u16": 2, "i16": 2,
    "u32": 4, "i32": 4,
    "u64": 8, "i64": 8,
    "u128": 16, "i128": 16,
    "u256": 32, "i256": 32,
    "f32": 4, "f64": 8,
    "pubkey": 32,
}

# Length-prefixed primitives
DYNAMIC_PRIMITIVES = ("string", "bytes")

PRIMITIVE_ALIASES = {
    "publicKey": "pubkey",
}


def account_discriminator(name):
    """First 8 bytes of sha256("account:<name>")"""
    digest = hashlib.sha256((DISCRIMINATOR_PREFIX + name).encode("utf-8")).digest()
    return digest[:DISCRIMINATOR_LENGTH]


def snake_case(name):
    """feeBPerLiquidity -> fee_b_per_liquidity (snake_case input is unchanged)"""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class FieldDef:
    name: str
    type: object


@dataclass(frozen=True)
class VariantDef:
    name: str
    fields: Tuple[FieldDef, ...] = ()


@dataclass(frozen=True)
class TypeDef:
    """A named struct or enum from the IDL types section"""
    name: str
    kind: str
    fields: Tuple[FieldDef, ...] = ()
    variants: Tuple[VariantDef, ...] = ()


@dataclass(frozen=True)
class AccountType:
    """A logical account type: name, content-derived tag and field layout"""
    name: str
    discriminator: bytes
    fields: Tuple[FieldDef, ...]

    def field_names(self):
        return [field.name for field in self.fields]


def normalize_type(node, context=""):
    """Normalize one IDL type node.

    Result is a primitive name (str) or a one-key dict:
    {"array": (inner, n)}, {"vec": inner}, {"option": inner},
    {"coption": inner} or {"defined": name}.
    """
    if isinstance(node, str):
        name = PRIMITIVE_ALIASES.get(node, node)
        if name in PRIMITIVE_SIZES or name in DYNAMIC_PRIMITIVES:
            return name
        raise SchemaError(f"Unsupported primitive type '{node}' in {context or 'IDL'}")

    if not isinstance(node, dict) or len(node) != 1:
        raise SchemaError(f"Unsupported type node {node!r} in {context or 'IDL'}")

    key, value = next(iter(node.items()))

    if key == "array":
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise SchemaError(f"Malformed array type {node!r} in {context}")
        inner, length = value
        if not isinstance(length, int) or length < 0:
            # Generic lengths ({"generic": "N"}) are not resolved
            raise SchemaError(f"Array length must be a literal integer in {context}: {length!r}")
        return {"array": (normalize_type(inner, context), length)}

    if key in ("vec", "option", "coption"):
        return {key: normalize_type(value, context)}

    if key == "defined":
        if isinstance(value, dict):
            if value.get("generics"):
                raise SchemaError(f"Generic defined types are not supported in {context}")
            value = value.get("name")
        if not isinstance(value, str) or not value:
            raise SchemaError(f"Malformed defined type {node!r} in {context}")
        return {"defined": value}

    raise SchemaError(f"Unsupported type '{key}' in {context or 'IDL'}")


def _parse_fields(raw_fields, context):
    """Parse named struct fields, or tuple-struct fields named "0", "1", ..."""
    fields = []
    for index, raw in enumerate(raw_fields or []):
        if isinstance(raw, dict) and "name" in raw and "type" in raw:
            name = snake_case(raw["name"])
            field_type = normalize_type(raw["type"], f"{context}.{name}")
        else:
            name = str(index)
            field_type = normalize_type(raw, f"{context}.{name}")
        fields.append(FieldDef(name=name, type=field_type))
    return tuple(fields)


def parse_type_def(raw):
    """Parse one entry of the IDL types section (or a legacy account entry)"""
    name = raw.get("name")
    body = raw.get("type") or {}
    kind = body.get("kind")

    if not name:
        raise SchemaError(f"IDL type without a name: {raw!r}")

    if kind == "struct":
        return TypeDef(name=name, kind="struct", fields=_parse_fields(body.get("fields"), name))

    if kind == "enum":
        variants = []
        for variant in body.get("variants") or []:
            variant_name = variant.get("name")
            variants.append(VariantDef(
                name=variant_name,
                fields=_parse_fields(variant.get("fields"), f"{name}::{variant_name}"),
            ))
        return TypeDef(name=name, kind="enum", variants=tuple(variants))

    if kind == "type" and "alias" in body:
        # Aliases are stored as single-field tuple structs and unwrapped by the decoder
        alias = normalize_type(body["alias"], name)
        return TypeDef(name=name, kind="alias", fields=(FieldDef(name="0", type=alias),))

    raise SchemaError(f"Unsupported kind '{kind}' for IDL type {name}")


class SchemaRegistry:
    """Registry of account types (by discriminator) and supporting types"""

    def __init__(self):
        self._accounts: Dict[str, AccountType] = {}
        self._by_tag: Dict[bytes, str] = {}
        self._types: Dict[str, TypeDef] = {}

    def __len__(self):
        return len(self._accounts)

    def __contains__(self, name):
        return name in self._accounts

    def register_type(self, type_def):
        self._types[type_def.name] = type_def

    def register_account(self, name, fields, discriminator=None):
        """Register an account layout; rejects duplicate names and tag collisions"""
        tag = account_discriminator(name)
        if discriminator is not None and bytes(discriminator) != tag:
            raise SchemaError(
                f"IDL discriminator for {name} ({bytes(discriminator).hex()}) "
                f"does not match sha256 tag ({tag.hex()})"
            )
        if name in self._accounts:
            raise SchemaError(f"Account type {name} registered twice")
        if tag in self._by_tag:
            raise SchemaError(
                f"Discriminator collision between {self._by_tag[tag]} and {name} ({tag.hex()})"
            )

        account_type = AccountType(name=name, discriminator=tag, fields=tuple(fields))
        self._accounts[name] = account_type
        self._by_tag[tag] = name
        return account_type

    def account_types(self) -> List[AccountType]:
        """Registered account types in registration order"""
        return list(self._accounts.values())

    def get_account(self, name) -> AccountType:
        try:
            return self._accounts[name]
        except KeyError:
            raise SchemaError(f"Unknown account type {name}") from None

    def get_type(self, name) -> TypeDef:
        try:
            return self._types[name]
        except KeyError:
            raise SchemaError(f"IDL type {name} is referenced but not defined") from None

    def find_type(self, name) -> Optional[TypeDef]:
        return self._types.get(name)

    @classmethod
    def from_idl(cls, idl):
        """Build a registry from a parsed Anchor IDL dict"""
        registry = cls()

        for raw_type in idl.get("types") or []:
            registry.register_type(parse_type_def(raw_type))

        accounts = idl.get("accounts") or []
        if not accounts:
            raise SchemaError("IDL has no accounts section")

        for raw_account in accounts:
            name = raw_account.get("name")
            if not name:
                raise SchemaError(f"IDL account without a name: {raw_account!r}")

            if "type" in raw_account:
                # Legacy IDL: layout inline
                type_def = parse_type_def(raw_account)
                registry.register_type(type_def)
            else:
                type_def = registry.find_type(name)
                if type_def is None:
                    raise SchemaError(f"No layout in IDL types for account {name}")

            if type_def.kind != "struct":
                raise SchemaError(f"Account {name} must be a struct, got {type_def.kind}")

            registry.register_account(
                name, type_def.fields, discriminator=raw_account.get("discriminator")
            )

        return registry

    @classmethod
    def from_idl_file(cls, idl_path):
        """Load an IDL JSON file; the registry is built once and treated as immutable"""
        if not os.path.exists(idl_path):
            raise SchemaError(f"IDL file not found at {idl_path}")
        try:
            with open(idl_path, "r") as f:
                idl = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaError(f"Error reading IDL file {idl_path}: {e}") from e
        return cls.from_idl(idl)
