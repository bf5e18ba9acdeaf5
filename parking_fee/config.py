#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config.py

Configuration constants and defaults for the parking fee calculator.

Only the surrounding tooling (loader defaults, CLI, trace file) reads these.
The fee calculation itself takes everything it needs as arguments.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Price tables
# ---------------------------------------------------------------------
# BUNDLED_TABLES_DIR:
# - Example price tables shipped with the package (YAML).
BUNDLED_TABLES_DIR = Path(__file__).resolve().parent / "tables"

# TABLES_DIR:
# - Directory the loader / CLI read price table definitions from.
# - Override with PARKINGFEE_TABLES_DIR to point at your own tables.
TABLES_DIR = Path(os.getenv("PARKINGFEE_TABLES_DIR", "") or BUNDLED_TABLES_DIR)

# ---------------------------------------------------------------------
# Logging / tracing
# ---------------------------------------------------------------------
# DEFAULT_LOG_LEVEL:
# - Level used by the CLI when --log-level is not given.
DEFAULT_LOG_LEVEL = os.getenv("PARKINGFEE_LOG_LEVEL", "WARNING").upper()

# TRACE_FILE:
# - JSONL file the CLI appends calculation events to when --trace is set.
TRACE_FILE = os.getenv("PARKINGFEE_TRACE_FILE", "parking_fee_trace.jsonl")

# ---------------------------------------------------------------------
# Time units
# ---------------------------------------------------------------------
# Instants are handled as epoch milliseconds internally.
MS_PER_MINUTE = 60 * 1000

# Time strings in price tables are "HH:MM".
DEFAULT_TOLERANCE = "00:00"
