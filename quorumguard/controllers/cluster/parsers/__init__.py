"""Parsers turning raw Kubernetes JSON into typed models."""

from quorumguard.controllers.cluster.parsers.resource_parser import ResourceParser

__all__ = ["ResourceParser"]
