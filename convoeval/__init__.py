"""Evaluation service that resolves customer display names from messages."""
