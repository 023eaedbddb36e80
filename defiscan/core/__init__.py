"""Core data layer components."""

from .models import (
    ExternalProtocol,
    ChainTvlPoint,
    CuratedProtocol,
    Project,
    RemoteFetchError,
)

from .cache import CacheEntry, FreshnessCache

from .aggregator import merge_project, merge_projects, ProjectAggregator

from .registry import (
    ProtocolRegistry,
    load_protocol_file,
    load_all_protocols_from_directory,
)

__all__ = [
    # Models
    "ExternalProtocol",
    "ChainTvlPoint",
    "CuratedProtocol",
    "Project",
    "RemoteFetchError",
    # Cache
    "CacheEntry",
    "FreshnessCache",
    # Aggregator
    "merge_project",
    "merge_projects",
    "ProjectAggregator",
    # Registry
    "ProtocolRegistry",
    "load_protocol_file",
    "load_all_protocols_from_directory",
]
