"""
Data models for the DeFiScan data layer.

Three record families flow through the system:
1. ExternalProtocol / ChainTvlPoint - parsed DeFiLlama API payloads
2. CuratedProtocol - locally authored protocol reviews
3. Project - the merged record handed to the presentation layer
"""

from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict
import json


class RemoteFetchError(Exception):
    """Raised when the analytics API cannot deliver a usable response."""

    def __init__(self, message: str, endpoint: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


def _to_float(value: Any, what: str) -> float:
    if value is None:
        return 0.0
    # bool is an int subclass but never a valid TVL
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RemoteFetchError(f"Non-numeric {what}: {value!r}")
    return float(value)


# =============================================================================
# EXTERNAL (DeFiLlama) RECORDS
# =============================================================================

@dataclass(frozen=True)
class ExternalProtocol:
    """One entry of the DeFiLlama /protocols listing."""
    slug: str
    name: str = ""
    tvl: float = 0.0
    category: str = ""
    logo: str = ""
    chains: List[str] = field(default_factory=list)
    chain_tvls: Dict[str, float] = field(default_factory=dict)

    def tvl_on(self, chain: str) -> float:
        """TVL restricted to a single chain, 0 when the chain is not listed."""
        return self.chain_tvls.get(chain, 0.0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExternalProtocol":
        """
        Create from a raw API entry.

        Raises:
            RemoteFetchError: if the entry does not have the expected shape
        """
        if not isinstance(data, dict):
            raise RemoteFetchError(f"Protocol entry is not an object: {data!r}")

        slug = data.get("slug")
        if not isinstance(slug, str):
            raise RemoteFetchError(f"Protocol entry without slug: {data.get('name', '?')}")

        raw_chain_tvls = data.get("chainTvls") or {}
        if not isinstance(raw_chain_tvls, dict):
            raise RemoteFetchError(f"chainTvls for {slug} is not an object")

        return cls(
            slug=slug,
            name=data.get("name") or "",
            tvl=_to_float(data.get("tvl"), f"tvl for {slug}"),
            category=data.get("category") or "",
            logo=data.get("logo") or "",
            chains=list(data.get("chains") or []),
            chain_tvls={
                chain: _to_float(value, f"{chain} tvl for {slug}")
                for chain, value in raw_chain_tvls.items()
            },
        )


@dataclass(frozen=True)
class ChainTvlPoint:
    """Daily point of the aggregate historical chain TVL series."""
    date: int  # unix seconds
    tvl: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChainTvlPoint":
        try:
            return cls(date=int(data["date"]), tvl=_to_float(data["tvl"], "historical tvl"))
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteFetchError(f"Malformed historical TVL point: {data!r}") from e


# =============================================================================
# CURATED RECORDS
# =============================================================================

@dataclass
class CuratedProtocol:
    """
    A locally authored protocol review.

    A protocol can map to several DeFiLlama entries (separate deployments,
    v2/v3 markets), so defillama_slug is always a list.
    """
    protocol: str
    slug: str
    defillama_slug: List[str]
    chain: str
    stage: Union[int, str]
    reasons: List[str] = field(default_factory=list)
    risks: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CuratedProtocol":
        """Create from dictionary (e.g., loaded from JSON)."""
        data = dict(data)
        if isinstance(data.get("defillama_slug"), str):
            data["defillama_slug"] = [data["defillama_slug"]]
        return cls(
            protocol=data["protocol"],
            slug=data["slug"],
            defillama_slug=list(data["defillama_slug"]),
            chain=data["chain"],
            stage=data["stage"],
            reasons=list(data.get("reasons") or []),
            risks=list(data.get("risks") or []),
        )


# =============================================================================
# MERGED RECORD
# =============================================================================

@dataclass
class Project:
    """Row of the protocols table. Field names are the UI contract."""
    logo: str
    protocol: str
    slug: str
    tvl: float
    chain: str
    stage: Union[int, str]
    reasons: List[str]
    type: str
    risks: List[str]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
