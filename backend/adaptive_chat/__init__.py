"""Adaptive Chat: multi-persona chat API with persisted conversations."""

__version__ = "0.1.0"
