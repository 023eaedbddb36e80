"""
DeFiLlama Fetcher - protocol listing, historical chain TVL, single protocol TVL.

All endpoints are public. Every failure (transport error, non-2xx status,
undecodable body) is logged with its endpoint and raised as RemoteFetchError.
No retries are attempted here.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from defiscan.config.settings import DEFILLAMA_CONFIG, DEFAULT_START_TIMESTAMP
from defiscan.core.cache import FreshnessCache
from defiscan.core.models import ChainTvlPoint, ExternalProtocol, RemoteFetchError

logger = logging.getLogger(__name__)


class DefiLlamaService:
    """
    Client for the DeFiLlama API with a cached view of /protocols.

    Construct one per process and hand it to the aggregator; the cache lives
    on the instance.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        cache: Optional[FreshnessCache] = None,
    ):
        self.base_url = (base_url or DEFILLAMA_CONFIG["base_url"]).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else DEFILLAMA_CONFIG["timeout"]
        self.cache = cache or FreshnessCache()

    # -------------------------
    # Transport
    # -------------------------
    def _get(self, endpoint: str) -> Any:
        """
        GET an endpoint and decode the JSON body.

        Raises:
            RemoteFetchError: on network failure, non-2xx status or bad JSON
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Error fetching from DeFiLlama API %s: %s", endpoint, e)
            raise RemoteFetchError(f"Request to {endpoint} failed: {e}", endpoint=endpoint) from e

        if not response.ok:
            logger.error("Error fetching from DeFiLlama API %s: HTTP %s", endpoint, response.status_code)
            raise RemoteFetchError(
                f"HTTP error! status: {response.status_code}",
                endpoint=endpoint,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("Error decoding DeFiLlama response from %s: %s", endpoint, e)
            raise RemoteFetchError(
                f"Undecodable body from {endpoint}",
                endpoint=endpoint,
                status_code=response.status_code,
            ) from e

    def _parse(self, endpoint: str, parser, payload: Any):
        # shape errors are logged like transport errors
        try:
            return parser(payload)
        except RemoteFetchError as e:
            e.endpoint = endpoint
            logger.error("Unexpected payload from DeFiLlama API %s: %s", endpoint, e)
            raise

    # -------------------------
    # Endpoints
    # -------------------------
    def get_protocols(self) -> List[ExternalProtocol]:
        """
        Fetch every protocol listed by DeFiLlama.

        Returns:
            Protocols in the order the API delivers them
        """
        endpoint = "/protocols"
        payload = self._get(endpoint)
        return self._parse(endpoint, _parse_protocols, payload)

    def get_historical_chain_tvl(self, start_timestamp: int = DEFAULT_START_TIMESTAMP) -> List[ChainTvlPoint]:
        """
        Fetch the aggregate historical TVL series.

        Args:
            start_timestamp: Only points strictly after this unix time are kept

        Returns:
            List of ChainTvlPoint, possibly empty
        """
        endpoint = "/v2/historicalChainTvl"
        payload = self._get(endpoint)
        points = self._parse(endpoint, _parse_history, payload)
        return [p for p in points if p.date > start_timestamp]

    def get_protocol_tvl(self, slug: str) -> float:
        """
        Fetch the current TVL of a single protocol.

        Args:
            slug: DeFiLlama protocol slug

        Raises:
            RemoteFetchError: if the slug does not resolve
        """
        endpoint = f"/protocol/{slug}"
        payload = self._get(endpoint)
        return self._parse(endpoint, _parse_protocol_tvl, payload)

    def get_protocols_with_cache(self) -> List[ExternalProtocol]:
        """Protocol listing, served from cache while fresh."""
        return self.cache.get_or_refresh(self.get_protocols)


# =============================================================================
# PAYLOAD PARSERS
# =============================================================================

def _parse_protocols(payload: Any) -> List[ExternalProtocol]:
    if not isinstance(payload, list):
        raise RemoteFetchError(f"Expected a list of protocols, got {type(payload).__name__}")
    return [ExternalProtocol.from_dict(entry) for entry in payload]


def _parse_history(payload: Any) -> List[ChainTvlPoint]:
    if not isinstance(payload, list):
        raise RemoteFetchError(f"Expected a list of TVL points, got {type(payload).__name__}")
    return [ChainTvlPoint.from_dict(point) for point in payload]


def _parse_protocol_tvl(payload: Any) -> float:
    if not isinstance(payload, dict):
        raise RemoteFetchError("Protocol payload is not an object")

    tvl = payload.get("tvl")
    # /protocol/{slug} returns the TVL history; the last point is current
    if isinstance(tvl, list):
        if not tvl:
            raise RemoteFetchError("Protocol has an empty TVL history")
        last: Dict[str, Any] = tvl[-1] if isinstance(tvl[-1], dict) else {}
        tvl = last.get("totalLiquidityUSD")

    if tvl is None or isinstance(tvl, bool) or not isinstance(tvl, (int, float)):
        raise RemoteFetchError(f"Protocol payload has no usable tvl: {tvl!r}")
    return float(tvl)
