"""Reunite - matching engine for lost and found item reports."""

__version__ = "0.1.0"
