"""PodDisruptionBudget model."""

from typing import Any

from pydantic import BaseModel, Field

from quorumguard.constants.values import PDB_API_VERSION


class DisruptionBudget(BaseModel):
    """A policy/v1 PodDisruptionBudget with an integer minAvailable."""

    namespace: str
    name: str
    min_available: int = Field(ge=0)
    selector: dict[str, str] = Field(default_factory=dict)
    resource_version: str = ""

    def to_manifest(self) -> dict[str, Any]:
        """Render the budget as a manifest accepted by ``kubectl create/replace``."""
        metadata: dict[str, Any] = {"name": self.name, "namespace": self.namespace}
        if self.resource_version:
            metadata["resourceVersion"] = self.resource_version
        return {
            "apiVersion": PDB_API_VERSION,
            "kind": "PodDisruptionBudget",
            "metadata": metadata,
            "spec": {
                "minAvailable": self.min_available,
                "selector": {"matchLabels": dict(self.selector)},
            },
        }
