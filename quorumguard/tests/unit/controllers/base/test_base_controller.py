"""Tests for base controller module."""

from __future__ import annotations

import pytest

from quorumguard.controllers.base.base_controller import BaseController, ReconcileResult
from quorumguard.models.events.watch_event import ReconcileRequest


class TestReconcileResult:
    """Tests for ReconcileResult dataclass."""

    def test_reconcile_result_success(self) -> None:
        result = ReconcileResult(success=True, data="created", duration_ms=12.5)
        assert result.success is True
        assert result.data == "created"
        assert result.error is None
        assert result.requeue is False

    def test_reconcile_result_error(self) -> None:
        result = ReconcileResult(success=False, error="conflict", requeue=True)
        assert result.success is False
        assert result.data is None
        assert result.error == "conflict"
        assert result.requeue is True

    def test_reconcile_result_defaults(self) -> None:
        result = ReconcileResult(success=True)
        assert result.duration_ms == 0.0
        assert result.requeue is False


class TestBaseController:
    """Tests for BaseController abstract class."""

    def test_base_controller_is_abstract(self) -> None:
        """BaseController cannot be instantiated directly."""
        with pytest.raises(TypeError):
            BaseController()  # type: ignore[abstract]

    @pytest.mark.asyncio
    async def test_concrete_controller(self) -> None:
        class ConcreteController(BaseController):
            async def check_connection(self) -> bool:
                return True

            async def reconcile(self, request: ReconcileRequest) -> ReconcileResult:
                return ReconcileResult(success=True, data=request.namespace)

        controller = ConcreteController()
        assert await controller.check_connection() is True
        result = await controller.reconcile(ReconcileRequest(namespace="rook-ceph"))
        assert result.data == "rook-ceph"
