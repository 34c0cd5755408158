"""
Run state threaded through the step sequence.
"""

from dataclasses import dataclass, replace
from typing import Any

from fhir_harness.config.defaults import DEFAULTS
from fhir_harness.config.settings import Settings
from fhir_harness.errors import MissingContextError
from fhir_harness.identifiers import generate_dataset_id, generate_fhir_store_id


@dataclass(frozen=True)
class TestContext:
    """
    Identifiers shared by the steps of one run.

    The context is immutable: a step that captures a server-generated value
    returns an updated copy, and the sequencer passes that copy on to the
    next step.
    """

    __test__ = False  # not a pytest test class

    project_id: str
    region: str
    dataset_id: str
    fhir_store_id: str
    resource_type: str = DEFAULTS.RESOURCE_TYPE
    fhir_version: str = DEFAULTS.FHIR_VERSION
    bundle_file: str = DEFAULTS.BUNDLE_FILE
    resource_id: str | None = None
    version_id: str | None = None
    fhir_store_created: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "TestContext":
        """Create a fresh context with newly generated dataset and store IDs."""
        return cls(
            project_id=settings.project_id or "",
            region=settings.cloud_region,
            dataset_id=generate_dataset_id(),
            fhir_store_id=generate_fhir_store_id(),
            resource_type=settings.resource_type,
            fhir_version=settings.fhir_version,
            bundle_file=settings.bundle_file,
        )

    def update(self, **changes: Any) -> "TestContext":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def require_resource_id(self) -> str:
        if not self.resource_id:
            raise MissingContextError("resource_id")
        return self.resource_id

    def require_version_id(self) -> str:
        if not self.version_id:
            raise MissingContextError("version_id")
        return self.version_id
