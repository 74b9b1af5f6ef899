"""Logging and event-feed helpers."""
