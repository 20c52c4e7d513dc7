#!/usr/bin/env python3
"""
Fee Snapshot Module for DAMM Fee Tracker
Drives fetch -> decode -> classify -> compute for every tracked pair and
records one combined row per run

Version: 1.0.0
Developer: 8roku8.hl
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from .blockchain import SolanaAccountFetcher
from .constants import DEFAULT_TOKEN_SIDE
from .decoder import decode_unknown_account
from .display import DisplayManager
from .fee_calculator import FeeBreakdown, classify_roles, compute_fee_breakdown
from .schema import SchemaRegistry
from .sheets import GoogleSheetsSink
from .snapshot_log import CsvSnapshotLog, build_row
from .utils import raw_to_tokens


def snapshot_position(pool_address, position_address, fetcher, registry, expected_owner,
                      side=DEFAULT_TOKEN_SIDE):
    """Unclaimed fees for one pool/position pair; errors propagate to the caller"""
    pool_raw = fetcher.fetch(pool_address)
    position_raw = fetcher.fetch(position_address)

    # Decode both accounts without assuming which one is which
    decoded_a = decode_unknown_account(pool_raw, registry, expected_owner)
    decoded_b = decode_unknown_account(position_raw, registry, expected_owner)

    pool, position = classify_roles(decoded_a, decoded_b, side)
    return compute_fee_breakdown(pool, position, side)


def utc_timestamp(now=None):
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2025-01-01T00:00:00.000Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class PairResult:
    name: str
    pool: str
    position: str
    raw_amount: int
    token_amount: Decimal
    breakdown: Optional[FeeBreakdown] = None
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None


@dataclass(frozen=True)
class SnapshotRun:
    timestamp: str
    results: List[PairResult] = field(default_factory=list)
    total_raw: int = 0
    total_tokens: Decimal = Decimal(0)

    def per_pair_tokens(self):
        return {result.name: result.token_amount for result in self.results}

    def failed(self):
        return [result for result in self.results if not result.ok]


class FeeSnapshotRunner:
    """Takes one snapshot of unclaimed fees across all configured pairs"""

    def __init__(self, config, fetcher=None, registry=None, csv_log=None, sheet_sink=None, display=None):
        self.config = config
        self.pairs = list(config["pairs"])
        self.side = config.get("token_side", DEFAULT_TOKEN_SIDE)
        self.decimals = config.get("token_decimals", 6)
        self.program_id = config["program_id"]
        self.display = display or DisplayManager(config)

        rpc_config = config.get("rpc", {})
        self.max_workers = max(1, int(rpc_config.get("max_workers", 4)))

        # Schema is loaded once and treated as immutable for the process lifetime
        self.registry = registry or SchemaRegistry.from_idl_file(config["idl_path"])
        self.display.print_debug(f"Loaded {len(self.registry)} IDL account types")

        self.fetcher = fetcher or SolanaAccountFetcher(
            config["rpc_url"],
            requests_per_minute=rpc_config.get("requests_per_minute", 90),
            timeout=rpc_config.get("timeout", 30),
            debug_mode=self.display.debug_mode,
        )

        self.csv_log = csv_log or CsvSnapshotLog(config["csv_path"], [pair["name"] for pair in self.pairs])
        self._sheet_sink = sheet_sink

    def process_pair(self, pair):
        """Snapshot one pair; failures are recorded as 0 with the error message"""
        try:
            breakdown = snapshot_position(
                pair["pool"], pair["position"], self.fetcher, self.registry,
                self.program_id, self.side,
            )
        except Exception as e:
            return PairResult(
                name=pair["name"], pool=pair["pool"], position=pair["position"],
                raw_amount=0, token_amount=Decimal(0), error=str(e) or type(e).__name__,
            )

        return PairResult(
            name=pair["name"],
            pool=pair["pool"],
            position=pair["position"],
            raw_amount=breakdown.total,
            token_amount=raw_to_tokens(breakdown.total, self.decimals),
            breakdown=breakdown,
        )

    def collect(self, timestamp=None):
        """Compute every pair (results keep config order) without writing anything"""
        timestamp = timestamp or utc_timestamp()
        self.display.print_run_start(timestamp, len(self.pairs))

        if self.max_workers == 1 or len(self.pairs) <= 1:
            results = [self.process_pair(pair) for pair in self.pairs]
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(self.pairs))) as executor:
                results = list(executor.map(self.process_pair, self.pairs))

        for result in results:
            if result.ok:
                self.display.print_pair_result(result)
            else:
                self.display.print_pair_error(result.name, result.error)

        total_raw = sum(result.raw_amount for result in results)
        return SnapshotRun(
            timestamp=timestamp,
            results=results,
            total_raw=total_raw,
            total_tokens=raw_to_tokens(total_raw, self.decimals),
        )

    def sheet_sink(self):
        if self._sheet_sink is None:
            self._sheet_sink = GoogleSheetsSink.from_config(self.config)
        return self._sheet_sink

    def run(self, write_csv=True, write_sheet=True, timestamp=None):
        """Full daily run: compute, print summary, append CSV row, append sheet row"""
        run = self.collect(timestamp)
        self.display.print_summary(run)

        if write_csv:
            self.csv_log.ensure_header()
            self.csv_log.append_row(run.timestamp, run.per_pair_tokens(), run.total_tokens)
            self.display.print_status(f"📝 Row appended to {self.csv_log.csv_path}", "green")

        if write_sheet:
            sink = self.sheet_sink()
            if sink is not None:
                row = build_row(run.timestamp, self.csv_log.pair_names, run.per_pair_tokens(), run.total_tokens)
                try:
                    sink.append_row(row)
                    self.display.print_status("📊 Google Sheet updated.", "green")
                except Exception as e:
                    self.display.print_status(f"❌ Failed to update Google Sheet: {e}", "red")

        return run
