"""Monitor quorum vs. disruption budget arithmetic."""

from __future__ import annotations

from quorumguard.constants.enums import QuorumConsistency
from quorumguard.constants.values import MON_PDB_NAME
from quorumguard.models.pdb.disruption_budget import DisruptionBudget


class QuorumValidator:
    """Checks the monitor budget against the declared monitor count.

    The smallest ``minAvailable`` that still keeps a simple majority of
    ``n`` monitors is ``n // 2 + 1``; any lower value lets a drain break
    quorum, any higher value blocks maintenance that would be safe.
    """

    def __init__(self, mon_pdb_name: str = MON_PDB_NAME) -> None:
        self.mon_pdb_name = mon_pdb_name

    @staticmethod
    def required_min_available(quorum_size: int) -> int | None:
        """Return the required ``minAvailable``, or None while the size is unknown."""
        if quorum_size < 0:
            raise ValueError(f"quorum size must not be negative, got {quorum_size}")
        if quorum_size == 0:
            return None
        return quorum_size // 2 + 1

    @classmethod
    def is_consistent(cls, quorum_size: int, min_available: int) -> QuorumConsistency:
        required = cls.required_min_available(quorum_size)
        if required is None:
            return QuorumConsistency.UNKNOWN
        if min_available == required:
            return QuorumConsistency.VALID
        return QuorumConsistency.INVALID

    def applies_to(self, budget_name: str) -> bool:
        return budget_name == self.mon_pdb_name

    def evaluate_budget(
        self, budget: DisruptionBudget, quorum_size: int
    ) -> QuorumConsistency | None:
        """Evaluate ``budget``; budgets other than the monitor budget return None."""
        if not self.applies_to(budget.name):
            return None
        return self.is_consistent(quorum_size, budget.min_available)
