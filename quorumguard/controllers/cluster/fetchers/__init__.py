"""Fetchers talking to the Kubernetes API on behalf of the controllers."""

from quorumguard.controllers.cluster.fetchers.kubectl_runner import KubectlRunner
from quorumguard.controllers.cluster.fetchers.kubectl_store import KubectlResourceStore
from quorumguard.controllers.cluster.fetchers.resource_store import ResourceStore
from quorumguard.controllers.cluster.fetchers.watch_fetcher import (
    JsonStreamDecoder,
    WatchFetcher,
    follow_watch,
)

__all__ = [
    "JsonStreamDecoder",
    "KubectlResourceStore",
    "KubectlRunner",
    "ResourceStore",
    "WatchFetcher",
    "follow_watch",
]
