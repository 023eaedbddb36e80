"""
DeFiScan data layer.

Merges curated protocol decentralization reviews with live DeFiLlama TVL.

Quick Start:
    from defiscan import DefiLlamaService, ProjectAggregator, ProtocolRegistry

    registry = ProtocolRegistry.from_directory("content/protocols")
    aggregator = ProjectAggregator(DefiLlamaService(), registry.all())
    for project in aggregator.get_projects():
        print(project.protocol, project.tvl)
"""

__version__ = "1.0.0"

from .core import (
    # Models
    ExternalProtocol,
    ChainTvlPoint,
    CuratedProtocol,
    Project,
    RemoteFetchError,
    # Cache
    FreshnessCache,
    # Aggregator
    merge_projects,
    ProjectAggregator,
    # Registry
    ProtocolRegistry,
    load_all_protocols_from_directory,
)

from .fetchers import DefiLlamaService

__all__ = [
    "__version__",
    "ExternalProtocol",
    "ChainTvlPoint",
    "CuratedProtocol",
    "Project",
    "RemoteFetchError",
    "FreshnessCache",
    "merge_projects",
    "ProjectAggregator",
    "ProtocolRegistry",
    "load_all_protocols_from_directory",
    "DefiLlamaService",
]
