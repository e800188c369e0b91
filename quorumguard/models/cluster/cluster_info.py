"""Typed views of the cluster-topology resources the controller watches."""

from typing import Any

from pydantic import BaseModel, Field

from quorumguard.constants.enums import ResourceKind


class ObjectMeta(BaseModel):
    """Subset of Kubernetes object metadata used by the controller."""

    name: str
    namespace: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    resource_version: str = ""


class CephClusterResource(BaseModel):
    """CephCluster custom resource."""

    metadata: ObjectMeta
    spec: dict[str, Any] = Field(default_factory=dict)
    status: dict[str, Any] = Field(default_factory=dict)

    @property
    def quorum_size(self) -> int:
        """Declared monitor count, 0 when spec.mon.count is not set yet."""
        mon = self.spec.get("mon") or {}
        count = mon.get("count", 0) if isinstance(mon, dict) else 0
        try:
            return max(0, int(count or 0))
        except (TypeError, ValueError):
            return 0

    def to_reference(self) -> "ClusterReference":
        return ClusterReference(
            namespace=self.metadata.namespace,
            name=self.metadata.name,
            quorum_size=self.quorum_size,
        )


class DeploymentResource(BaseModel):
    """apps/v1 Deployment, reduced to what drain detection needs."""

    metadata: ObjectMeta
    replicas: int = 0
    unavailable_replicas: int = 0


class StorageChildResource(BaseModel):
    """Pool, filesystem or object store belonging to a cluster."""

    kind: ResourceKind
    metadata: ObjectMeta


class ClusterReference(BaseModel):
    """A storage cluster and its declared monitor quorum size.

    ``quorum_size`` 0 means the CephCluster spec has no monitor count yet.
    """

    namespace: str
    name: str
    quorum_size: int = Field(default=0, ge=0)
