"""
DeFiScan data layer configuration.

DeFiLlama endpoint, cache window and content location.
"""

import os
from pathlib import Path


def _optional_float(name: str):
    value = os.getenv(name)
    return float(value) if value else None


# DeFiLlama API settings
DEFILLAMA_CONFIG = {
    "base_url": os.getenv("DEFILLAMA_BASE_URL", "https://api.llama.fi"),
    "timeout": _optional_float("DEFILLAMA_TIMEOUT"),  # None = no client-side timeout
    "cache_duration_seconds": float(os.getenv("DEFILLAMA_CACHE_SECONDS", 5 * 60)),
}

# Historical TVL default start (2020-01-01T00:00Z)
DEFAULT_START_TIMESTAMP = 1577836800

# Curated protocol reviews
CONTENT_CONFIG = {
    "protocols_dir": os.getenv(
        "DEFISCAN_PROTOCOLS_DIR",
        str(Path(__file__).resolve().parent.parent / "content" / "protocols"),
    ),
}

LOG_LEVEL = os.getenv("DEFISCAN_LOG_LEVEL", "INFO")
