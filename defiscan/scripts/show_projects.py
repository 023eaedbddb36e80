"""
Project table report.

Loads the curated protocol reviews, merges them with live DeFiLlama TVL and
prints the result as a table or JSON.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

import pandas as pd

from defiscan.config.settings import CONTENT_CONFIG, LOG_LEVEL
from defiscan.core.aggregator import ProjectAggregator
from defiscan.core.models import Project, RemoteFetchError
from defiscan.core.registry import load_all_protocols_from_directory
from defiscan.fetchers.defillama import DefiLlamaService

logger = logging.getLogger(__name__)

COLUMNS = ["logo", "protocol", "slug", "tvl", "chain", "stage", "reasons", "type", "risks"]


def projects_to_frame(projects: Sequence[Project]) -> pd.DataFrame:
    """Convert merged rows to a DataFrame with the table column order."""
    return pd.DataFrame([p.to_dict() for p in projects], columns=COLUMNS)


def format_usd(value: float) -> str:
    """Compact USD formatting ($1.23B, $4.5M, $980K)."""
    for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(value) >= threshold:
            return f"${value / threshold:.2f}{suffix}"
    return f"${value:.2f}"


def print_project_table(projects: Sequence[Project], sort: str = "tvl"):
    """Print formatted project table."""
    df = projects_to_frame(projects)
    if df.empty:
        print("No protocols found!")
        return

    ascending = sort != "tvl"
    df = df.sort_values(sort, ascending=ascending, kind="stable")
    df["tvl"] = df["tvl"].map(format_usd)
    df["reasons"] = df["reasons"].map(", ".join)
    df["risks"] = df["risks"].map("".join)

    print("\n" + "=" * 100)
    print("DEFISCAN PROTOCOLS")
    print("=" * 100)
    print(df[["protocol", "chain", "stage", "type", "tvl", "risks", "reasons"]].to_string(index=False))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Show curated protocols merged with DeFiLlama TVL")
    parser.add_argument("--protocols-dir", default=CONTENT_CONFIG["protocols_dir"],
                        help="Directory of curated protocol JSON files")
    parser.add_argument("--sort", choices=["tvl", "protocol"], default="tvl")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    protocols = load_all_protocols_from_directory(args.protocols_dir)
    logger.info("Loaded %d curated protocols from %s", len(protocols), args.protocols_dir)

    aggregator = ProjectAggregator(DefiLlamaService(), protocols)
    try:
        projects = aggregator.get_projects()
    except RemoteFetchError as e:
        print(f"Error: could not fetch DeFiLlama data: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([p.to_dict() for p in projects], indent=2))
    else:
        print_project_table(projects, sort=args.sort)
    return 0


if __name__ == "__main__":
    sys.exit(main())
