"""quorumguard - keeps Rook/Ceph monitor disruption budgets in line with the quorum."""

__version__ = "0.1.0"
