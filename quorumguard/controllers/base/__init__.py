"""Base controller classes."""

from quorumguard.controllers.base.base_controller import BaseController, ReconcileResult

__all__ = ["BaseController", "ReconcileResult"]
