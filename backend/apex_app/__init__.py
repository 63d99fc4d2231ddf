"""Async application layer: quote feed, live charts and alerts."""
