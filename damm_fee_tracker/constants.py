#!/usr/bin/env python3
"""
Constants Module for DAMM Fee Tracker
Contains program ids, fixed-point constants, IDL field names and default configuration

Version: 1.0.0
Developer: 8roku8.hl
"""

# Version and metadata
VERSION = "1.0.0"
DEVELOPER = "8roku8.hl"
CONFIG_FILE = "fee_snapshot_config.json"

# Meteora DAMM v2 (cp-amm) program, owner of every pool and position account
DAMM_V2_PROGRAM_ID = "cpamdpZCGKUy5JxQXB4dcpGPiikHawvSWAd6mEn1sGG"

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

# Anchor account discriminator: sha256("account:<Name>")[:8]
DISCRIMINATOR_PREFIX = "account:"
DISCRIMINATOR_LENGTH = 8

# Fee-per-liquidity accumulators are U256 fixed point with 128 fractional bits
LIQUIDITY_SCALE = 1 << 128

# Token side the fee fields are read for ("a" or "b")
TOKEN_SIDES = ("a", "b")
DEFAULT_TOKEN_SIDE = "b"

# Position liquidity components, summed to get the fee-earning liquidity
LIQUIDITY_FIELDS = (
    "unlocked_liquidity",
    "vested_liquidity",
    "permanent_locked_liquidity",
)


def pool_accumulator_field(side):
    """Pool-level cumulative fee per unit of liquidity (U256 LE bytes)"""
    return f"fee_{side}_per_liquidity"


def position_checkpoint_field(side):
    """Accumulator value last settled into the position (U256 LE bytes)"""
    return f"fee_{side}_per_token_checkpoint"


def position_pending_field(side):
    """Fees already settled into the position but not yet claimed (u64)"""
    return f"fee_{side}_pending"


# CSV / sheet layout
CSV_TIME_COLUMN = "time"
CSV_TOTAL_COLUMN = "Total"

GOOGLE_SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
GOOGLE_SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"

# SCARCE (token B on every tracked pool)
SCARCE_MINT = "HmTQ5XFTJos95FraWfQ2vA2exdLHpghi9ofZL1hJb1Dt"
SCARCE_DECIMALS = 6

# Tracked pairs; order defines CSV/sheet column order
DEFAULT_PAIRS = [
    {
        "name": "USDC/SCARCE",
        "pool": "5NTgc3UVv9k4VE7dRFA9p9nwbsBwK98UqDBpWgxUpQGM",
        "position": "9gv2J53nGeG1WgsuuUEszu22Qsww8DiuaxY6n9s69NvS",
    },
    {
        "name": "SOL/SCARCE",
        "pool": "DP6TQnxVJm8mnr8hgP1kEsGuobtPixnhXbmhCnwnhzpA",
        "position": "DQbTWNmnRCTH2kYc7PTHUMFKVjKbqo6a9jDyjm5Gvyw5",
    },
    {
        "name": "ETH/SCARCE",
        "pool": "8Ki2eoYCg4T4u81so4FeBdD2dQV77Vw4itseVv1UGJJR",
        "position": "4hFJ7VZH7iBkrk1JzvgbvjoVpHX774JjjM15jvJLrb2C",
    },
    {
        "name": "BTC/SCARCE",
        "pool": "8qxAav4uGykfwiVDF9rdm4hmH2uYx9d8pXrmYTqRBgt2",
        "position": "GYRrMpf2LZjhqz5RHHmabNuMXSrhpDkqnvuurx8ekRZr",
    },
]

# Default configuration
DEFAULT_CONFIG = {
    "version": VERSION,
    "rpc_url": DEFAULT_RPC_URL,
    "program_id": DAMM_V2_PROGRAM_ID,
    "idl_path": "idl.json",
    "token_side": DEFAULT_TOKEN_SIDE,
    "token_mint": SCARCE_MINT,
    "token_decimals": SCARCE_DECIMALS,
    "pairs": DEFAULT_PAIRS,
    "csv_path": "feelockdata.csv",
    "google_sheets": {
        "enabled": True,          # Only used when sheet_id + credentials are set
        "sheet_id": "",
        "credentials_path": "",
        "worksheet": ""           # Empty = first sheet
    },
    "rpc": {
        "requests_per_minute": 90,  # keep headroom under public endpoint limits
        "timeout": 30,
        "max_workers": 4
    },
    "display_settings": {
        "debug_mode": False,
        "show_breakdown": False   # Print liquidity / delta per pair
    }
}

# Environment variables that override config values
ENV_OVERRIDES = {
    "RPC_URL": ("rpc_url",),
    "DAMM_IDL_PATH": ("idl_path",),
    "GSHEET_ID": ("google_sheets", "sheet_id"),
    "GOOGLE_APPLICATION_CREDENTIALS": ("google_sheets", "credentials_path"),
}
