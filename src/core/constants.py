"""Core constants used across rollup modules.

This module centralizes fixed identifiers, prefixes, and default paths.
Keeping values here avoids magic literals in aggregation logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".")
RAW_DIR_NAME = "raw"
DAILY_DIR_PARTS = ("data", "daily")
FI_REGISTRY_FILE_NAME = "fi_registry.json"
DAILY_FILE_SUFFIX = ".json"

GA_SOURCE = "ga"
SESSIONS_SOURCE = "sessions"
PLACEMENTS_SOURCE = "placements"
RAW_SOURCE_TYPES = (GA_SOURCE, SESSIONS_SOURCE, PLACEMENTS_SOURCE)
RAW_METADATA_FIELD = "_metadata"

CARDUPDATR_HOST_SUFFIX = ".cardupdatr.app"
UNKNOWN_INSTANCE = "unknown"
UNKNOWN_FI = "unknown_fi"
UNKNOWN_TERMINATION = "UNKNOWN"
FI_INSTANCE_KEY_SEPARATOR = "__"

LEGACY_DEFAULT_FI_KEY = "default"
LEGACY_PROD_ALIAS = "advancial-prod"
LEGACY_PROD_ALIAS_CANONICAL = "advancialprod"

SELECT_MERCHANTS_PREFIX = "/select-merchants"
USER_DATA_COLLECTION_PREFIX = "/user-data-collection"
CREDENTIAL_ENTRY_PREFIX = "/credential-entry"
GA_PAGE_STAGES = (
    (SELECT_MERCHANTS_PREFIX, "select_merchants"),
    (USER_DATA_COLLECTION_PREFIX, "user_data_collection"),
    (CREDENTIAL_ENTRY_PREFIX, "credential_entry"),
)

SUCCESSFUL_PLACEMENT_STATUS = "SUCCESSFUL"
BILLABLE_TERMINATION_TYPE = "BILLABLE"

DEFAULT_INSTANCE_DISPLAY_OVERRIDES = {"digitalonboarding": "digital-onboarding"}
DEFAULT_TEST_INSTANCE_NAMES = ("customer-dev",)
