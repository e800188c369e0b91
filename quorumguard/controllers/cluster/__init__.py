"""Init file for cluster module."""

from quorumguard.controllers.cluster.fetchers import (
    KubectlResourceStore,
    KubectlRunner,
    ResourceStore,
    WatchFetcher,
)
from quorumguard.controllers.cluster.parsers import ResourceParser

__all__ = [
    "KubectlResourceStore",
    "KubectlRunner",
    "ResourceParser",
    "ResourceStore",
    "WatchFetcher",
]
