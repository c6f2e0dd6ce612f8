"""Raw data ingestion and range orchestration.

This module reads per-day raw source payloads and drives the daily
rollup build across a date range.
"""
