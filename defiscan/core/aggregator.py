"""
Project Aggregator - joins curated reviews with DeFiLlama data.

Produces one Project row per curated protocol, in input order:
- tvl: sum of chain TVL over every matched DeFiLlama slug, on the curated chain only
- type / logo: taken from the last matched slug
- unmatched slugs contribute nothing and are not reported
"""

from typing import List, Optional, Sequence

from defiscan.core.models import CuratedProtocol, ExternalProtocol, Project


def _find_external(slug: str, external: Sequence[ExternalProtocol]) -> Optional[ExternalProtocol]:
    """First external record whose slug is exactly equal."""
    for record in external:
        if record.slug == slug:
            return record
    return None


def merge_project(curated: CuratedProtocol, external: Sequence[ExternalProtocol]) -> Project:
    """Build the merged row for a single curated protocol."""
    tvl = 0.0
    category = ""
    logo = ""

    for slug in curated.defillama_slug:
        match = _find_external(slug, external)
        if match is None:
            continue
        tvl += match.tvl_on(curated.chain)
        category = match.category
        logo = match.logo

    return Project(
        logo=logo,
        protocol=curated.protocol,
        slug=curated.slug,
        tvl=tvl,
        chain=curated.chain,
        stage=curated.stage,
        reasons=list(curated.reasons),
        type=category,
        risks=list(curated.risks),
    )


def merge_projects(curated: Sequence[CuratedProtocol], external: Sequence[ExternalProtocol]) -> List[Project]:
    """
    Join curated protocols against the external dataset.

    Args:
        curated: Curated protocol reviews
        external: Parsed DeFiLlama protocol listing

    Returns:
        Exactly one Project per curated protocol, same order
    """
    return [merge_project(protocol, external) for protocol in curated]


class ProjectAggregator:
    """
    Produces the Project rows consumed by the protocols table and pages.

    Merged rows are recomputed on every call; only the DeFiLlama listing is
    cached (inside the service).
    """

    def __init__(self, service, protocols: Sequence[CuratedProtocol]):
        """
        Args:
            service: Object exposing get_protocols_with_cache() (DefiLlamaService)
            protocols: Curated protocols, loaded once per process
        """
        self.service = service
        self.protocols = list(protocols)

    def get_projects(self) -> List[Project]:
        """
        Raises:
            RemoteFetchError: if the DeFiLlama listing cannot be fetched
        """
        external = self.service.get_protocols_with_cache()
        return merge_projects(self.protocols, external)

    def get_project(self, slug: str) -> Optional[Project]:
        """Merged row for one curated slug, or None if no such protocol."""
        curated = next((p for p in self.protocols if p.slug == slug), None)
        if curated is None:
            return None
        external = self.service.get_protocols_with_cache()
        return merge_project(curated, external)
