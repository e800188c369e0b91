"""Watch events and reconcile requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from quorumguard.constants.enums import EventVerb, ResourceKind
from quorumguard.models.cluster.cluster_info import (
    CephClusterResource,
    DeploymentResource,
    StorageChildResource,
)
from quorumguard.models.pdb.disruption_budget import DisruptionBudget

# Kinds that can trigger a reconcile request; all carry ObjectMeta
RoutedObject = Union[
    CephClusterResource,
    DeploymentResource,
    StorageChildResource,
]

WatchedObject = Union[RoutedObject, DisruptionBudget]


@dataclass(frozen=True)
class WatchEvent:
    """A typed change notification for one watched object.

    ``old_object`` is only set for updates.
    """

    kind: ResourceKind
    verb: EventVerb
    new_object: WatchedObject
    old_object: WatchedObject | None = None


@dataclass(frozen=True)
class ReconcileRequest:
    """Unit of work naming a namespace; ``name`` is resolved by the reconciler."""

    namespace: str
    name: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.name else self.namespace


@dataclass(frozen=True)
class RawWatchEvent:
    """An undecoded change notification as delivered by the resource store."""

    kind: ResourceKind
    verb: EventVerb
    new_raw: Any
    old_raw: Any = None
