#!/usr/bin/env python3
"""
Utility Functions Module for DAMM Fee Tracker
Common helper functions used across modules

Version: 1.0.0
Developer: 8roku8.hl
"""

from decimal import Decimal


def raw_to_tokens(raw_amount, decimals):
    """Convert a raw integer amount to token units without float rounding"""
    raw_amount = int(raw_amount)
    if raw_amount == 0:
        return Decimal(0)
    # Built from the digit tuple so amounts wider than the context precision stay exact
    sign, digits, _ = Decimal(raw_amount).as_tuple()
    return Decimal((sign, digits, -int(decimals)))


def format_token_amount(amount, symbol=""):
    """Format token amounts nicely"""
    amount = Decimal(amount)
    suffix = f" {symbol}" if symbol else ""
    if amount > 1000:
        return f"{amount:,.2f}{suffix}"
    elif amount > 1:
        return f"{amount:.4f}{suffix}"
    elif amount > 0:
        return f"{amount:.6f}{suffix}"
    else:
        return f"0{suffix}"


def format_raw_amount(raw_amount):
    """Group digits of raw integer amounts"""
    return f"{int(raw_amount):,}"


def short_address(address, keep=4):
    """Shorten base58 addresses for display"""
    address = str(address)
    if len(address) <= keep * 2 + 3:
        return address
    return f"{address[:keep]}...{address[-keep:]}"


def column_letter(index):
    """1-based column index -> spreadsheet column letter (1 -> A, 27 -> AA)"""
    if index < 1:
        raise ValueError(f"Column index must be positive, got {index}")
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def validate_pair_config(pair):
    """Validate a single tracked pair configuration"""
    return bool(pair.get("name") and pair.get("pool") and pair.get("position"))


def validate_pair_configs(pairs):
    """Validate all pair configurations and return valid ones (first name wins)"""
    valid_pairs = []
    seen_names = set()
    for pair in pairs:
        if not validate_pair_config(pair):
            print(f"⚠️  Skipping incomplete pair config: {pair}")
            continue
        if pair["name"] in seen_names:
            print(f"⚠️  Skipping duplicate pair name: {pair['name']}")
            continue
        seen_names.add(pair["name"])
        valid_pairs.append(pair)

    return valid_pairs
