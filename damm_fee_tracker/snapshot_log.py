#!/usr/bin/env python3
"""
Snapshot Log Module for DAMM Fee Tracker
Appends one combined row per run to the CSV fee log:

    time,<pair 1>,<pair 2>,...,Total

Version: 1.0.0
Developer: 8roku8.hl
"""

import csv
import os

from .constants import CSV_TIME_COLUMN, CSV_TOTAL_COLUMN


def build_row(timestamp, pair_names, per_pair, total):
    """Row values in pair order; pairs without a value are written as 0"""
    return [timestamp] + [per_pair.get(name, 0) for name in pair_names] + [total]


class CsvSnapshotLog:
    """CSV file holding one row per snapshot run"""

    def __init__(self, csv_path, pair_names):
        self.csv_path = csv_path
        self.pair_names = list(pair_names)

    @property
    def header(self):
        return [CSV_TIME_COLUMN] + self.pair_names + [CSV_TOTAL_COLUMN]

    def ensure_header(self):
        """Write the header row if the file is missing or empty"""
        if os.path.exists(self.csv_path) and os.path.getsize(self.csv_path) > 0:
            return False

        directory = os.path.dirname(self.csv_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(self.csv_path, 'w', newline='') as f:
            csv.writer(f).writerow(self.header)
        return True

    def append_row(self, timestamp, per_pair, total):
        """Append ONE combined row: time + all pairs + total"""
        row = build_row(timestamp, self.pair_names, per_pair, total)
        with open(self.csv_path, 'a', newline='') as f:
            csv.writer(f).writerow(row)
        return row

    def read_rows(self):
        """All rows as dicts keyed by header (empty list if no file yet)"""
        if not os.path.exists(self.csv_path):
            return []
        with open(self.csv_path, 'r', newline='') as f:
            return list(csv.DictReader(f))
