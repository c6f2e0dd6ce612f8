"""Daily document layer.

This module assembles unified per-day documents and persists them
atomically for dashboard consumers.
"""
