"""
Pydantic models for sample output and run reports.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field


class ResourceMeta(BaseModel):
    """The ``meta`` element of a FHIR resource."""

    versionId: str | None = Field(default=None, description="Server-assigned version")
    lastUpdated: str | None = Field(default=None)

    model_config = {"extra": "allow"}


class HistoryResource(BaseModel):
    """A resource version inside a history bundle."""

    resourceType: str | None = Field(default=None)
    id: str | None = Field(default=None)
    meta: ResourceMeta | None = Field(default=None)

    model_config = {"extra": "allow"}


class HistoryEntry(BaseModel):
    """A single entry in a history bundle."""

    fullUrl: str | None = Field(default=None)
    resource: HistoryResource | None = Field(default=None)

    model_config = {"extra": "allow"}


class HistoryBundle(BaseModel):
    """FHIR history Bundle printed by the list-history sample."""

    resourceType: str = Field(default="Bundle")
    type: str | None = Field(default=None, description="Bundle type (history)")
    entry: list[HistoryEntry] = Field(default_factory=list, description="Bundle entries")

    model_config = {"extra": "allow"}


class StepStatus(str, Enum):
    """Outcome of a single step."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class StepResult(BaseModel):
    """Result of running one step of the sequence."""

    name: str = Field(description="Step name")
    description: str = Field(default="", description="What the step checks")
    status: StepStatus = Field(description="passed | failed | skipped")
    message: str | None = Field(default=None, description="Failure or skip reason")
    error: dict[str, Any] | None = Field(default=None, description="Serialized harness error")
    duration_ms: float = Field(default=0.0, description="Wall-clock time of the step")


class RunReport(BaseModel):
    """Complete report of one harness run."""

    run_id: str
    project_id: str | None = None
    dataset_id: str
    fhir_store_id: str
    resource_type: str
    resource_id: str | None = None
    version_id: str | None = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    steps: list[StepResult] = Field(default_factory=list)

    @computed_field
    @property
    def passed(self) -> bool:
        return all(step.status == StepStatus.PASSED for step in self.steps)

    @computed_field
    @property
    def failed_count(self) -> int:
        return sum(1 for step in self.steps if step.status == StepStatus.FAILED)

    def get_step(self, name: str) -> StepResult | None:
        """Look up a step result by name."""
        for step in self.steps:
            if step.name == name:
                return step
        return None
