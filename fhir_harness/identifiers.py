"""
Unique identifiers for the remote objects a harness run owns.

Concurrent runs against the same project must never collide, so every
dataset and FHIR store name embeds a random UUID.
"""

import uuid

from fhir_harness.config.defaults import DEFAULTS
from fhir_harness.validation import validate_cloud_id


def _unique_id(prefix: str) -> str:
    # The service rejects hyphens in some identifier positions
    return f"{prefix}{uuid.uuid4()}".replace("-", "_")


def generate_dataset_id(prefix: str = DEFAULTS.DATASET_PREFIX) -> str:
    """Generate a dataset ID that is unique to this run."""
    return validate_cloud_id(_unique_id(prefix), field="dataset_id")


def generate_fhir_store_id(prefix: str = DEFAULTS.FHIR_STORE_PREFIX) -> str:
    """Generate a FHIR store ID that is unique to this run."""
    return validate_cloud_id(_unique_id(prefix), field="fhir_store_id")
