#!/usr/bin/env python3
"""
Blockchain Interaction Module for DAMM Fee Tracker
Handles the Solana RPC connection and raw account fetching

Version: 1.0.0
Developer: 8roku8.hl
"""

import threading
import time
from collections import deque

from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solders.pubkey import Pubkey

from .decoder import RawAccount
from .errors import AccountNotFound, ConfigError

RATE_LIMIT_MARKERS = ("rate limit", "too many requests", "429")


def parse_pubkey(address):
    """Base58 string -> Pubkey, raising ConfigError for bad addresses"""
    try:
        return Pubkey.from_string(str(address))
    except ValueError as e:
        raise ConfigError(f"Invalid Solana address '{address}': {e}") from e


class SolanaAccountFetcher:
    """Fetches raw accounts (data + owner) over Solana JSON-RPC"""

    def __init__(self, rpc_url, requests_per_minute=90, timeout=30, debug_mode=False, client=None):
        self.rpc_url = rpc_url
        self.debug_mode = debug_mode
        self.client = client or Client(rpc_url, commitment=Confirmed, timeout=timeout)

        # Global RPC rate limiter (requests/minute), shared by worker threads
        self._rpm_limit = requests_per_minute
        self._rpc_call_times = deque()
        self._rate_lock = threading.Lock()
        self.retry_pause_seconds = 5

    def check_connection(self):
        """True if the RPC endpoint answers"""
        try:
            return bool(self.client.is_connected())
        except Exception:
            return False

    def _throttle_rpc(self):
        """Simple token-bucket-like limiter to keep under rpm limit."""
        if self._rpm_limit <= 0:
            return
        with self._rate_lock:
            now = time.time()
            window = 60.0
            # drop old
            while self._rpc_call_times and (now - self._rpc_call_times[0]) > window:
                self._rpc_call_times.popleft()
            if len(self._rpc_call_times) >= self._rpm_limit:
                sleep_for = window - (now - self._rpc_call_times[0]) + 0.05
                if sleep_for > 0:
                    time.sleep(sleep_for)
            # record
            self._rpc_call_times.append(time.time())

    def _rl_call(self, fn, *args, **kwargs):
        try:
            self._throttle_rpc()
            return fn(*args, **kwargs)
        except Exception as e:
            message = str(e).lower()
            if any(marker in message for marker in RATE_LIMIT_MARKERS):
                if self.debug_mode:
                    print(f"Rate limited, waiting {self.retry_pause_seconds} seconds...")
                time.sleep(self.retry_pause_seconds)
                self._throttle_rpc()
                return fn(*args, **kwargs)
            raise

    def fetch(self, address):
        """Fetch one account as RawAccount; AccountNotFound if it does not exist"""
        pubkey = parse_pubkey(address)
        response = self._rl_call(self.client.get_account_info, pubkey)

        account = response.value
        if account is None:
            raise AccountNotFound(str(address))

        if self.debug_mode:
            print(f"🔍 {address}: {len(account.data)} bytes, owner {account.owner}")

        return RawAccount(address=str(address), data=bytes(account.data), owner=str(account.owner))
