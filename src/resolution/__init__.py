"""Artifact resolution and version reconciliation engine."""
