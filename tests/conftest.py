"""
Pytest configuration and fixtures for the DeFiScan data layer.

This file contains shared fixtures used across all test modules.
Fixtures follow the pattern: factory functions with sensible defaults.
"""

import pytest
import sys
from pathlib import Path
from typing import Dict, Any, List
from unittest.mock import MagicMock

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from defiscan.core.cache import FreshnessCache
from defiscan.core.models import CuratedProtocol, ExternalProtocol
from defiscan.fetchers.defillama import DefiLlamaService


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def protocols_dir(project_root: Path) -> Path:
    """Return the bundled curated protocols directory."""
    return project_root / "defiscan" / "content" / "protocols"


# =============================================================================
# RECORD FACTORIES
# =============================================================================

@pytest.fixture
def external_factory():
    """
    Factory fixture for ExternalProtocol records.

    Usage:
        def test_something(external_factory):
            record = external_factory("aave-v3", chain_tvls={"Ethereum": 10.0})
    """
    def _create(slug: str, **overrides) -> ExternalProtocol:
        base = {
            "slug": slug,
            "name": slug.title(),
            "tvl": sum(overrides.get("chain_tvls", {}).values()),
            "category": "Lending",
            "logo": f"https://icons.llama.fi/{slug}.png",
            "chains": list(overrides.get("chain_tvls", {}).keys()),
            "chain_tvls": {},
        }
        base.update(overrides)
        return ExternalProtocol(**base)

    return _create


@pytest.fixture
def curated_factory():
    """Factory fixture for CuratedProtocol records."""
    def _create(slug: str = "test-protocol", defillama_slug: List[str] = None, **overrides) -> CuratedProtocol:
        base = {
            "protocol": "Test Protocol",
            "slug": slug,
            "defillama_slug": defillama_slug if defillama_slug is not None else [slug],
            "chain": "Ethereum",
            "stage": 0,
            "reasons": [],
            "risks": ["L", "M", "H", "L", "M"],
        }
        base.update(overrides)
        return CuratedProtocol(**base)

    return _create


# =============================================================================
# API PAYLOAD FIXTURES
# =============================================================================

@pytest.fixture
def protocols_payload() -> List[Dict[str, Any]]:
    """Trimmed DeFiLlama /protocols response."""
    return [
        {
            "id": "1599",
            "name": "Aave V3",
            "slug": "aave-v3",
            "logo": "https://icons.llama.fi/aave-v3.png",
            "category": "Lending",
            "chains": ["Ethereum", "Arbitrum"],
            "tvl": 15_000_000_000,
            "chainTvls": {"Ethereum": 12_000_000_000, "Arbitrum": 3_000_000_000},
        },
        {
            "id": "1",
            "name": "Uniswap V2",
            "slug": "uniswap-v2",
            "logo": "https://icons.llama.fi/uniswap-v2.png",
            "category": "Dexes",
            "chains": ["Ethereum"],
            "tvl": 1_500_000_000,
            "chainTvls": {"Ethereum": 1_500_000_000},
        },
        {
            "id": "2",
            "name": "Uniswap V3",
            "slug": "uniswap-v3",
            "logo": "https://icons.llama.fi/uniswap-v3.png",
            "category": "Dexes",
            "chains": ["Ethereum", "Arbitrum"],
            "tvl": 4_000_000_000,
            "chainTvls": {"Ethereum": 3_000_000_000, "Arbitrum": 1_000_000_000},
        },
        {
            "id": "3",
            "name": "Unlisted Logo",
            "slug": "no-logo",
            "logo": None,
            "category": None,
            "tvl": None,
            "chainTvls": {},
        },
    ]


@pytest.fixture
def history_payload() -> List[Dict[str, Any]]:
    """Trimmed DeFiLlama /v2/historicalChainTvl response."""
    return [
        {"date": 1577750400, "tvl": 600_000_000},
        {"date": 1577836800, "tvl": 620_000_000},
        {"date": 1577923200, "tvl": 640_000_000},
        {"date": 1700000000, "tvl": 45_000_000_000},
    ]


# =============================================================================
# MOCK FIXTURES FOR EXTERNAL APIS
# =============================================================================

def make_response(payload: Any = None, status_code: int = 200) -> MagicMock:
    """Build a mocked requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    return response


@pytest.fixture
def response_factory():
    """Factory fixture for mocked responses: response_factory(payload, status_code=200)."""
    return make_response


@pytest.fixture
def mock_session():
    """Mock requests.Session; set .get.return_value / side_effect per test."""
    session = MagicMock()
    session.get.return_value = make_response([])
    return session


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(mock_session, clock) -> DefiLlamaService:
    """DefiLlamaService wired to a mocked session and fake clock."""
    return DefiLlamaService(
        base_url="https://api.llama.test",
        session=mock_session,
        cache=FreshnessCache(ttl_seconds=300, clock=clock),
    )
