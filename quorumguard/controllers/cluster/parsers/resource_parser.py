"""Resource parser - turns raw kubectl JSON into typed resource models.

This is the only place raw payloads are inspected; everything past it works
on the typed ``WatchEvent`` variant.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from quorumguard.constants.enums import STORAGE_CHILD_KINDS, EventVerb, ResourceKind
from quorumguard.models.cluster.cluster_info import (
    CephClusterResource,
    DeploymentResource,
    ObjectMeta,
    StorageChildResource,
)
from quorumguard.models.events.watch_event import WatchedObject, WatchEvent
from quorumguard.models.pdb.disruption_budget import DisruptionBudget


class ResourceParser:
    """Parses raw resource dictionaries into typed models.

    Every parse method raises ``ValueError`` (pydantic's ``ValidationError``
    included) when the payload is not the expected kind.
    """

    def __init__(self) -> None:
        self._parsers: dict[ResourceKind, Callable[[dict[str, Any]], WatchedObject]] = {
            ResourceKind.CEPH_CLUSTER: self.parse_cluster,
            ResourceKind.DEPLOYMENT: self.parse_deployment,
            ResourceKind.POD_DISRUPTION_BUDGET: self.parse_disruption_budget,
        }
        for child_kind in STORAGE_CHILD_KINDS:
            self._parsers[child_kind] = self._child_parser(child_kind)

    @staticmethod
    def _require_kind(raw: Any, kind: ResourceKind) -> dict[str, Any]:
        if not isinstance(raw, dict):
            raise ValueError(f"Expected {kind.value} object, got {type(raw).__name__}")
        raw_kind = raw.get("kind")
        if raw_kind is not None and raw_kind != kind.value:
            raise ValueError(f"Expected {kind.value} object, got {raw_kind}")
        return raw

    @staticmethod
    def _mapping(raw: dict[str, Any], key: str, owner: str) -> dict[str, Any]:
        """Return ``raw[key]`` as a dict; absent or null counts as empty."""
        value = raw.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"{owner} field {key!r} must be an object, got {type(value).__name__}")
        return value

    @staticmethod
    def parse_metadata(raw: dict[str, Any]) -> ObjectMeta:
        metadata = raw.get("metadata")
        if not isinstance(metadata, dict):
            raise ValueError("Object has no metadata")
        return ObjectMeta(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", "") or "",
            labels=metadata.get("labels") or {},
            resource_version=str(metadata.get("resourceVersion", "") or ""),
        )

    def parse_cluster(self, raw: Any) -> CephClusterResource:
        data = self._require_kind(raw, ResourceKind.CEPH_CLUSTER)
        return CephClusterResource(
            metadata=self.parse_metadata(data),
            spec=self._mapping(data, "spec", "CephCluster"),
            status=self._mapping(data, "status", "CephCluster"),
        )

    def parse_deployment(self, raw: Any) -> DeploymentResource:
        data = self._require_kind(raw, ResourceKind.DEPLOYMENT)
        spec = self._mapping(data, "spec", "Deployment")
        status = self._mapping(data, "status", "Deployment")
        return DeploymentResource(
            metadata=self.parse_metadata(data),
            replicas=spec.get("replicas", 0) or 0,
            unavailable_replicas=status.get("unavailableReplicas", 0) or 0,
        )

    def parse_disruption_budget(self, raw: Any) -> DisruptionBudget:
        """Parse a PDB; a percentage or missing minAvailable is not supported."""
        data = self._require_kind(raw, ResourceKind.POD_DISRUPTION_BUDGET)
        metadata = self.parse_metadata(data)
        spec = self._mapping(data, "spec", "PodDisruptionBudget")
        min_available = spec.get("minAvailable")
        if isinstance(min_available, bool) or not isinstance(min_available, int):
            raise ValueError(
                f"PodDisruptionBudget {metadata.namespace}/{metadata.name} "
                f"has non-integer minAvailable {min_available!r}"
            )
        selector = self._mapping(spec, "selector", "PodDisruptionBudget")
        match_labels = self._mapping(selector, "matchLabels", "PodDisruptionBudget")
        return DisruptionBudget(
            namespace=metadata.namespace,
            name=metadata.name,
            min_available=min_available,
            selector={str(key): str(value) for key, value in match_labels.items()},
            resource_version=metadata.resource_version,
        )

    def _child_parser(self, kind: ResourceKind) -> Callable[[Any], StorageChildResource]:
        def _parse(raw: Any) -> StorageChildResource:
            data = self._require_kind(raw, kind)
            return StorageChildResource(kind=kind, metadata=self.parse_metadata(data))

        return _parse

    def parse(self, kind: ResourceKind, raw: Any) -> WatchedObject:
        """Parse ``raw`` as ``kind``."""
        return self._parsers[kind](raw)

    def parse_watch_event(
        self,
        kind: ResourceKind,
        verb: EventVerb,
        new_raw: Any,
        old_raw: Any = None,
    ) -> WatchEvent:
        """Build a typed watch event; raises ``ValueError`` on malformed payloads."""
        new_object = self.parse(kind, new_raw)
        old_object = self.parse(kind, old_raw) if old_raw is not None else None
        return WatchEvent(kind=kind, verb=verb, new_object=new_object, old_object=old_object)
