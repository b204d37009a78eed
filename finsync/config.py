"""Configuration management for FinSync.

This module centralizes all configuration values including paths,
thresholds, defaults, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List

# Base project root - assumes this file is in finsync/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINSYNC_DATA_DIR", _PROJECT_ROOT / "data"))

# Database
DB_PATH = Path(
    os.getenv("FINSYNC_DB_PATH", DATA_DIR / "finsync.db")
).resolve()

# UI preferences cache (filters, active tab)
CACHE_PATH = DATA_DIR / "view_state.json"

LOG_LEVEL = os.getenv("FINSYNC_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

CURRENCY_SYMBOL = os.getenv("FINSYNC_CURRENCY", "R$")

# Alert thresholds
ALERT_WARNING_PERCENT = 80.0
EXPENSE_TREND_TOLERANCE = 0.20

DEFAULT_PERIOD = "month"
DEFAULT_CATEGORY_COLOR = "#EF4444"
ORPHAN_CATEGORY_COLOR = "#6B7280"

PAYMENT_METHODS: List[str] = [
    "Dinheiro",
    "Cartão de Débito",
    "Cartão de Crédito",
    "PIX",
    "Transferência",
]

# Seeded into an empty categories table by ``db.init_db``.
DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {"name": "Salário", "kind": "income", "limit": None, "color": "#10B981"},
    {"name": "Freelance", "kind": "income", "limit": None, "color": "#059669"},
    {"name": "Investimentos", "kind": "income", "limit": None, "color": "#047857"},
    {"name": "Outros", "kind": "income", "limit": None, "color": "#065F46"},
    {"name": "Alimentação", "kind": "expense", "limit": 800.0, "color": "#EF4444"},
    {"name": "Transporte", "kind": "expense", "limit": 400.0, "color": "#F97316"},
    {"name": "Moradia", "kind": "expense", "limit": 1500.0, "color": "#8B5CF6"},
    {"name": "Saúde", "kind": "expense", "limit": 300.0, "color": "#06B6D4"},
    {"name": "Educação", "kind": "expense", "limit": 200.0, "color": "#84CC16"},
    {"name": "Lazer", "kind": "expense", "limit": 500.0, "color": "#F59E0B"},
    {"name": "Compras", "kind": "expense", "limit": 600.0, "color": "#EC4899"},
    {"name": "Outros", "kind": "expense", "limit": 300.0, "color": "#6B7280"},
]


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, DB_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the app and scripts."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format=LOG_FORMAT,
    )
