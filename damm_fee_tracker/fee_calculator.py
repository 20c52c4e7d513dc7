#!/usr/bin/env python3
"""
Fee Accrual Calculator for DAMM Fee Tracker
Computes unclaimed fees for a position from the pool accumulator and the
position checkpoint

unclaimed = liquidity * (fee_per_liquidity - checkpoint) / 2^128 + pending

All accumulator math is done on Python ints, so U256 values and the
liquidity * delta product never overflow or lose precision.

Version: 1.0.0
Developer: 8roku8.hl
"""

from dataclasses import dataclass

from .constants import (
    DEFAULT_TOKEN_SIDE, LIQUIDITY_FIELDS, LIQUIDITY_SCALE,
    pool_accumulator_field, position_checkpoint_field, position_pending_field
)
from .errors import UnresolvedRoles


@dataclass(frozen=True)
class FeeBreakdown:
    """Intermediate values of one unclaimed fee computation (raw units)"""
    liquidity: int
    accumulator: int
    checkpoint: int
    delta: int
    clamped: bool
    newly_accrued: int
    pending: int
    total: int


def u256_le_to_int(raw):
    """Little-endian bytes (byte 0 least significant) -> unbounded int"""
    if isinstance(raw, int):
        return raw
    return int.from_bytes(bytes(raw), "little")


def _require(record, name, role):
    if not record.has_field(name):
        raise UnresolvedRoles(
            f"{role} account {record.address} ({record.type_name}) has no field '{name}'"
        )
    return record[name]


def position_liquidity(position):
    """unlocked + vested + permanently locked liquidity"""
    return sum(int(_require(position, name, "Position")) for name in LIQUIDITY_FIELDS)


def classify_roles(record_a, record_b, side=DEFAULT_TOKEN_SIDE):
    """Order two decoded records as (pool, position), whatever the fetch order"""
    pool_field = pool_accumulator_field(side)
    checkpoint_field = position_checkpoint_field(side)

    if record_a.has_field(pool_field):
        pool, position = record_a, record_b
    elif record_b.has_field(pool_field):
        pool, position = record_b, record_a
    else:
        raise UnresolvedRoles(
            f"Neither {record_a.address} ({record_a.type_name}) nor "
            f"{record_b.address} ({record_b.type_name}) looks like a pool (missing {pool_field})"
        )

    if not position.has_field(checkpoint_field):
        raise UnresolvedRoles(
            f"Decoded position account {position.address} ({position.type_name}) "
            f"missing {checkpoint_field}"
        )

    return pool, position


def compute_fee_breakdown(pool, position, side=DEFAULT_TOKEN_SIDE):
    """Unclaimed fees for one position with every intermediate value"""
    liquidity = position_liquidity(position)
    pending = int(_require(position, position_pending_field(side), "Position"))
    accumulator = u256_le_to_int(_require(pool, pool_accumulator_field(side), "Pool"))
    checkpoint = u256_le_to_int(_require(position, position_checkpoint_field(side), "Position"))

    if liquidity == 0:
        # Fully withdrawn / empty position
        return FeeBreakdown(
            liquidity=0, accumulator=accumulator, checkpoint=checkpoint,
            delta=0, clamped=False, newly_accrued=0, pending=pending, total=0,
        )

    # Pool and position are read in separate, non-atomic requests; a checkpoint
    # ahead of the accumulator is read skew and accrues nothing.
    clamped = checkpoint > accumulator
    if clamped:
        delta = 0
    else:
        delta = accumulator - checkpoint

    newly_accrued = (liquidity * delta) // LIQUIDITY_SCALE
    total = newly_accrued + pending

    return FeeBreakdown(
        liquidity=liquidity,
        accumulator=accumulator,
        checkpoint=checkpoint,
        delta=delta,
        clamped=clamped,
        newly_accrued=newly_accrued,
        pending=pending,
        total=total,
    )


def compute_unclaimed_fees(pool, position, side=DEFAULT_TOKEN_SIDE):
    """Unclaimed fees owed to a position, in the token's smallest unit"""
    return compute_fee_breakdown(pool, position, side).total
