#!/usr/bin/env python3
"""
DAMM Fee Tracker Package
Daily snapshot of unclaimed fees for Meteora DAMM v2 LP positions on Solana

Package Structure:
├── __init__.py              # This file - package initialization
├── main.py                  # CLI entry point
├── config.py                # Configuration management
├── constants.py             # Program ids, fixed-point constants, defaults
├── errors.py                # Error taxonomy
├── schema.py                # Anchor IDL -> account layouts + discriminators
├── decoder.py               # Discriminator resolution and Borsh decoding
├── fee_calculator.py        # Role classification and unclaimed fee math
├── blockchain.py            # Solana RPC account fetching
├── fee_snapshot.py          # Per-run orchestration
├── snapshot_log.py          # CSV row log
├── sheets.py                # Google Sheets row sink
├── display.py               # Rich console output
└── utils.py                 # Helper functions

Version: 1.0.0
Developer: 8roku8.hl
"""

from .constants import VERSION, DEVELOPER, DEFAULT_CONFIG, LIQUIDITY_SCALE
from .errors import (
    FeeTrackerError, ConfigError, SchemaError, AccountNotFound, OwnershipMismatch,
    UnknownAccountType, MalformedAccountData, UnresolvedRoles
)
from .schema import SchemaRegistry, AccountType, account_discriminator
from .decoder import RawAccount, DecodedRecord, resolve_account_type, decode_account, decode_unknown_account
from .fee_calculator import (
    FeeBreakdown, classify_roles, compute_fee_breakdown, compute_unclaimed_fees, u256_le_to_int
)
from .fee_snapshot import FeeSnapshotRunner, snapshot_position

# Package metadata
__version__ = VERSION
__author__ = DEVELOPER
__description__ = "Unclaimed fee snapshots for Meteora DAMM v2 LP positions"

__all__ = [
    'FeeSnapshotRunner',
    'snapshot_position',
    'SchemaRegistry',
    'AccountType',
    'account_discriminator',
    'RawAccount',
    'DecodedRecord',
    'resolve_account_type',
    'decode_account',
    'decode_unknown_account',
    'FeeBreakdown',
    'classify_roles',
    'compute_fee_breakdown',
    'compute_unclaimed_fees',
    'u256_le_to_int',
    'FeeTrackerError',
    'ConfigError',
    'SchemaError',
    'AccountNotFound',
    'OwnershipMismatch',
    'UnknownAccountType',
    'MalformedAccountData',
    'UnresolvedRoles',
    'LIQUIDITY_SCALE',
    'DEFAULT_CONFIG',
    'VERSION',
    'DEVELOPER'
]
