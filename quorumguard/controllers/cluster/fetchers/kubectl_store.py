"""kubectl-backed resource store."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from quorumguard.constants.enums import ResourceKind
from quorumguard.constants.values import (
    RESOURCE_CEPH_BLOCK_POOL,
    RESOURCE_CEPH_CLUSTER,
    RESOURCE_CEPH_FILESYSTEM,
    RESOURCE_CEPH_OBJECT_STORE,
    RESOURCE_DEPLOYMENT,
    RESOURCE_PDB,
)
from quorumguard.controllers.cluster.fetchers.kubectl_runner import KubectlRunner
from quorumguard.controllers.cluster.fetchers.watch_fetcher import WatchFetcher
from quorumguard.controllers.cluster.parsers.resource_parser import ResourceParser
from quorumguard.exceptions import (
    ConflictError,
    KubectlError,
    NotFoundError,
    ResourceStoreError,
    TransientStoreError,
)
from quorumguard.models.cluster.cluster_info import CephClusterResource
from quorumguard.models.events.watch_event import RawWatchEvent
from quorumguard.models.pdb.disruption_budget import DisruptionBudget
from quorumguard.utils.exit_status import exit_status, is_transient_error

logger = logging.getLogger(__name__)

RESOURCE_NAMES: dict[ResourceKind, str] = {
    ResourceKind.CEPH_CLUSTER: RESOURCE_CEPH_CLUSTER,
    ResourceKind.DEPLOYMENT: RESOURCE_DEPLOYMENT,
    ResourceKind.CEPH_BLOCK_POOL: RESOURCE_CEPH_BLOCK_POOL,
    ResourceKind.CEPH_FILESYSTEM: RESOURCE_CEPH_FILESYSTEM,
    ResourceKind.CEPH_OBJECT_STORE: RESOURCE_CEPH_OBJECT_STORE,
    ResourceKind.POD_DISRUPTION_BUDGET: RESOURCE_PDB,
}


class KubectlResourceStore:
    """Resource store speaking to the API server through kubectl."""

    _NOT_FOUND_TOKENS = ("(notfound)", "not found")
    _CONFLICT_TOKENS = ("(conflict)", "(alreadyexists)", "the object has been modified")

    def __init__(
        self,
        runner: KubectlRunner,
        *,
        parser: ResourceParser | None = None,
        watch_fetcher: WatchFetcher | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._runner = runner
        self._parser = parser or ResourceParser()
        self._watch_fetcher = watch_fetcher or WatchFetcher(runner.build_command)
        self._log = log or logger

    def _request_timeout_arg(self) -> str:
        return f"--request-timeout={self._runner.request_timeout}"

    def _translate_error(
        self, error: KubectlError, kind: str, namespace: str, name: str
    ) -> ResourceStoreError:
        """Map a kubectl failure onto the store's error taxonomy."""
        status = exit_status(error)
        stderr = (error.stderr or str(error)).lower()
        self._log.debug(
            "kubectl %s failed (exit status %s): %s",
            " ".join(error.command_args),
            status.code if status.known else "unknown",
            error.stderr,
        )
        if any(token in stderr for token in self._NOT_FOUND_TOKENS):
            return NotFoundError(kind, namespace, name)
        if any(token in stderr for token in self._CONFLICT_TOKENS):
            return ConflictError(str(error))
        if is_transient_error(error):
            return TransientStoreError(str(error))
        return ResourceStoreError(str(error))

    async def _run_json(
        self,
        args: tuple[str, ...],
        *,
        kind: str,
        namespace: str,
        name: str = "",
        input_text: str | None = None,
    ) -> Any:
        try:
            output = await self._runner.run(args, input_text)
        except KubectlError as exc:
            raise self._translate_error(exc, kind, namespace, name) from exc
        try:
            return json.loads(output) if output.strip() else {}
        except json.JSONDecodeError as exc:
            raise ResourceStoreError(f"Unparseable kubectl output for {kind}: {exc}") from exc

    async def check_connection(self) -> bool:
        """Return True when the API server answers."""
        try:
            await self._runner.run(("version", "-o", "json", self._request_timeout_arg()))
        except KubectlError as exc:
            self._log.warning("Cluster connection check failed: %s", exc)
            return False
        return True

    async def get_cluster(self, namespace: str, name: str) -> CephClusterResource:
        data = await self._run_json(
            ("get", RESOURCE_CEPH_CLUSTER, name, "-n", namespace, "-o", "json",
             self._request_timeout_arg()),
            kind=RESOURCE_CEPH_CLUSTER,
            namespace=namespace,
            name=name,
        )
        try:
            return self._parser.parse_cluster(data)
        except ValueError as exc:
            raise ResourceStoreError(f"Malformed CephCluster {namespace}/{name}: {exc}") from exc

    async def list_clusters(self, namespace: str) -> list[CephClusterResource]:
        data = await self._run_json(
            ("get", RESOURCE_CEPH_CLUSTER, "-n", namespace, "-o", "json",
             self._request_timeout_arg()),
            kind=RESOURCE_CEPH_CLUSTER,
            namespace=namespace,
        )
        clusters: list[CephClusterResource] = []
        for item in data.get("items", []) if isinstance(data, dict) else []:
            try:
                clusters.append(self._parser.parse_cluster(item))
            except ValueError:
                self._log.warning("Skipping malformed CephCluster in namespace %s", namespace)
        return clusters

    async def get_disruption_budget(self, namespace: str, name: str) -> DisruptionBudget:
        data = await self._run_json(
            ("get", RESOURCE_PDB, name, "-n", namespace, "-o", "json",
             self._request_timeout_arg()),
            kind=RESOURCE_PDB,
            namespace=namespace,
            name=name,
        )
        try:
            return self._parser.parse_disruption_budget(data)
        except ValueError as exc:
            raise ResourceStoreError(str(exc)) from exc

    async def _write_budget(self, verb: str, budget: DisruptionBudget) -> DisruptionBudget:
        data = await self._run_json(
            (verb, "-f", "-", "-o", "json", self._request_timeout_arg()),
            kind=RESOURCE_PDB,
            namespace=budget.namespace,
            name=budget.name,
            input_text=json.dumps(budget.to_manifest()),
        )
        try:
            return self._parser.parse_disruption_budget(data)
        except ValueError:
            return budget

    async def create_disruption_budget(self, budget: DisruptionBudget) -> DisruptionBudget:
        return await self._write_budget("create", budget)

    async def update_disruption_budget(self, budget: DisruptionBudget) -> DisruptionBudget:
        return await self._write_budget("replace", budget)

    def watch(
        self,
        kind: ResourceKind,
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> AsyncGenerator[RawWatchEvent, None]:
        return self._watch_fetcher.watch(
            kind,
            RESOURCE_NAMES[kind],
            namespace=namespace,
            label_selector=label_selector,
        )
