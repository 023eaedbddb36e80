"""
Protocol Registry - curated protocol reviews loaded from JSON files.

Files are expected to be authored and checked upstream; this module only
reads them.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from defiscan.core.models import CuratedProtocol

logger = logging.getLogger(__name__)


def load_protocol_file(file_path: Union[str, Path]) -> CuratedProtocol:
    """
    Load a single curated protocol from a JSON file.

    Args:
        file_path: Path to JSON file

    Returns:
        CuratedProtocol
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return CuratedProtocol.from_dict(data)


def load_all_protocols_from_directory(directory: Union[str, Path]) -> List[CuratedProtocol]:
    """
    Load all JSON protocol files from a directory.

    Files are read in filename order. A file that cannot be loaded is logged
    and skipped.

    Args:
        directory: Path to directory containing JSON files

    Returns:
        List of loaded protocols
    """
    protocols = []
    dir_path = Path(directory)

    for json_file in sorted(dir_path.glob("*.json")):
        try:
            protocols.append(load_protocol_file(json_file))
            logger.debug("Loaded: %s", json_file.name)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Failed to load %s: %s", json_file.name, e)

    return protocols


class ProtocolRegistry:
    """In-memory set of curated protocols, keyed by slug."""

    def __init__(self, protocols: Iterable[CuratedProtocol]):
        self._protocols = list(protocols)
        self._by_slug: Dict[str, CuratedProtocol] = {p.slug: p for p in self._protocols}

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "ProtocolRegistry":
        return cls(load_all_protocols_from_directory(directory))

    def all(self) -> List[CuratedProtocol]:
        return list(self._protocols)

    def get(self, slug: str) -> Optional[CuratedProtocol]:
        return self._by_slug.get(slug)

    def __len__(self) -> int:
        return len(self._protocols)
