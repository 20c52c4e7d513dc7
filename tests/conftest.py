import copy
import io
import struct

import pytest
from rich.console import Console
from solders.pubkey import Pubkey

from damm_fee_tracker.constants import DAMM_V2_PROGRAM_ID, DEFAULT_CONFIG
from damm_fee_tracker.decoder import RawAccount
from damm_fee_tracker.display import DisplayManager
from damm_fee_tracker.errors import AccountNotFound
from damm_fee_tracker.schema import SchemaRegistry, account_discriminator


def pubkey(n):
    return str(Pubkey(bytes([n]) * 32))


POOL_ADDRESS = pubkey(1)
POSITION_ADDRESS = pubkey(2)
TOKEN_A_MINT = pubkey(3)
TOKEN_B_MINT = pubkey(4)
NFT_MINT = pubkey(5)


def u256(value):
    return int(value).to_bytes(32, "little")


def u128(value):
    return int(value).to_bytes(16, "little")


def u64(value):
    return struct.pack("<Q", value)


# Trimmed cp-amm style IDL (0.30+ layout: account names + types section)
DAMM_IDL = {
    "address": DAMM_V2_PROGRAM_ID,
    "metadata": {"name": "cp_amm", "version": "0.1.0", "spec": "0.1.0"},
    "accounts": [
        {"name": "Config", "discriminator": list(account_discriminator("Config"))},
        {"name": "Pool", "discriminator": list(account_discriminator("Pool"))},
        {"name": "Position", "discriminator": list(account_discriminator("Position"))},
    ],
    "types": [
        {
            "name": "Config",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "pool_creator_authority", "type": "pubkey"},
                    {"name": "activation_type", "type": "u8"},
                ],
            },
        },
        {
            "name": "PoolMetrics",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "total_lp_a_fee", "type": "u128"},
                    {"name": "total_lp_b_fee", "type": "u128"},
                ],
            },
        },
        {
            "name": "Pool",
            "serialization": "bytemuckunsafe",
            "repr": {"kind": "c"},
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "token_a_mint", "type": "pubkey"},
                    {"name": "token_b_mint", "type": "pubkey"},
                    {"name": "liquidity", "type": "u128"},
                    {"name": "fee_a_per_liquidity", "type": {"array": ["u8", 32]}},
                    {"name": "fee_b_per_liquidity", "type": {"array": ["u8", 32]}},
                    {"name": "pool_status", "type": "u8"},
                    {"name": "metrics", "type": {"defined": {"name": "PoolMetrics"}}},
                    {"name": "padding", "type": {"array": ["u64", 2]}},
                ],
            },
        },
        {
            "name": "PositionMetrics",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "total_claimed_a_fee", "type": "u64"},
                    {"name": "total_claimed_b_fee", "type": "u64"},
                ],
            },
        },
        {
            "name": "Position",
            "serialization": "bytemuckunsafe",
            "repr": {"kind": "c"},
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "pool", "type": "pubkey"},
                    {"name": "nft_mint", "type": "pubkey"},
                    {"name": "fee_a_per_token_checkpoint", "type": {"array": ["u8", 32]}},
                    {"name": "fee_b_per_token_checkpoint", "type": {"array": ["u8", 32]}},
                    {"name": "fee_a_pending", "type": "u64"},
                    {"name": "fee_b_pending", "type": "u64"},
                    {"name": "unlocked_liquidity", "type": "u128"},
                    {"name": "vested_liquidity", "type": "u128"},
                    {"name": "permanent_locked_liquidity", "type": "u128"},
                    {"name": "metrics", "type": {"defined": {"name": "PositionMetrics"}}},
                    {"name": "padding", "type": {"array": ["u128", 2]}},
                ],
            },
        },
    ],
}


def pool_data(fee_b_per_liquidity=0, fee_a_per_liquidity=0, liquidity=0, pool_status=0, padding_tail=b""):
    return (
        account_discriminator("Pool")
        + bytes(Pubkey.from_string(TOKEN_A_MINT))
        + bytes(Pubkey.from_string(TOKEN_B_MINT))
        + u128(liquidity)
        + u256(fee_a_per_liquidity)
        + u256(fee_b_per_liquidity)
        + bytes([pool_status])
        + u128(11) + u128(22)
        + u64(0) + u64(0)
        + padding_tail
    )


def position_data(checkpoint_b=0, pending_b=0, unlocked=0, vested=0, permanent=0,
                  checkpoint_a=0, pending_a=0):
    return (
        account_discriminator("Position")
        + bytes(Pubkey.from_string(POOL_ADDRESS))
        + bytes(Pubkey.from_string(NFT_MINT))
        + u256(checkpoint_a)
        + u256(checkpoint_b)
        + u64(pending_a)
        + u64(pending_b)
        + u128(unlocked)
        + u128(vested)
        + u128(permanent)
        + u64(7) + u64(8)
        + u128(0) + u128(0)
    )


class FakeFetcher:
    """In-memory account source keyed by address"""

    def __init__(self, accounts=None):
        self.accounts = dict(accounts or {})
        self.calls = []

    def add(self, address, data, owner=DAMM_V2_PROGRAM_ID):
        self.accounts[address] = RawAccount(address=address, data=data, owner=owner)

    def fetch(self, address):
        self.calls.append(address)
        if address not in self.accounts:
            raise AccountNotFound(address)
        return self.accounts[address]


@pytest.fixture
def idl():
    return copy.deepcopy(DAMM_IDL)


@pytest.fixture
def registry(idl):
    return SchemaRegistry.from_idl(idl)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def make_pool():
    def _make(address=POOL_ADDRESS, owner=DAMM_V2_PROGRAM_ID, **fields):
        return RawAccount(address=address, data=pool_data(**fields), owner=owner)
    return _make


@pytest.fixture
def make_position():
    def _make(address=POSITION_ADDRESS, owner=DAMM_V2_PROGRAM_ID, **fields):
        return RawAccount(address=address, data=position_data(**fields), owner=owner)
    return _make


@pytest.fixture
def config(tmp_path):
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    cfg["csv_path"] = str(tmp_path / "feelockdata.csv")
    cfg["idl_path"] = str(tmp_path / "idl.json")
    cfg["pairs"] = [
        {"name": "USDC/SCARCE", "pool": pubkey(10), "position": pubkey(11)},
        {"name": "SOL/SCARCE", "pool": pubkey(20), "position": pubkey(21)},
    ]
    cfg["google_sheets"]["sheet_id"] = ""
    cfg["google_sheets"]["credentials_path"] = ""
    return cfg


@pytest.fixture
def quiet_display(config):
    output = io.StringIO()
    return DisplayManager(config, console_=Console(file=output, width=120))
