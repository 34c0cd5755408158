"""
Shared pytest fixtures for harness tests.
"""

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from fhir_harness.config.defaults import RESOURCE_COMMANDS, SAMPLE_SCRIPTS
from fhir_harness.config.settings import Settings, reset_settings
from fhir_harness.context import TestContext
from fhir_harness.runner import CommandResult

RESOURCE_ID = "abc-123"
VERSION_ID = "MTY4NjU2NzE3NDAwMDAwMDAwMA"

Response = CommandResult | Exception | Callable[[list[str]], CommandResult]


class FakeRunner:
    """
    CommandRunner double that returns canned output per sample script.

    Responses are keyed by script name, or by ``(script, subcommand)`` for the
    combined resources script. Unknown scripts succeed with empty output.
    """

    def __init__(self, responses: Mapping[Any, Response] | None = None):
        self.responses: dict[Any, Response] = dict(responses or {})
        self.calls: list[dict[str, Any]] = []

    def invoke(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        args = list(args)
        self.calls.append({"program": program, "args": args, "cwd": cwd, "env": env})

        script = args[0]
        key = (script, args[1]) if len(args) > 1 and (script, args[1]) in self.responses else script
        response = self.responses.get(key, CommandResult(stdout=""))

        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(args)
        return response

    def scripts(self) -> list[str]:
        """Script names in invocation order."""
        return [call["args"][0] for call in self.calls]


def history_output(version_id: str = VERSION_ID) -> str:
    """History bundle as printed by the list-history sample."""
    bundle = {
        "resourceType": "Bundle",
        "type": "history",
        "entry": [
            {
                "fullUrl": f"Patient/{RESOURCE_ID}/_history/{version_id}",
                "resource": {
                    "resourceType": "Patient",
                    "id": RESOURCE_ID,
                    "meta": {"versionId": version_id, "lastUpdated": "2024-01-15T10:30:00Z"},
                },
            }
        ],
    }
    return json.dumps(bundle, indent=2) + "\n"


def passing_responses(resource_type: str = "Patient") -> dict[Any, Response]:
    """Outputs that satisfy every step for ``resource_type``."""
    return {
        (SAMPLE_SCRIPTS.FHIR_RESOURCES, RESOURCE_COMMANDS.CREATE): CommandResult(
            stdout=f"Created FHIR resource {resource_type} with ID {RESOURCE_ID}.\n"
        ),
        (SAMPLE_SCRIPTS.FHIR_RESOURCES, RESOURCE_COMMANDS.PATCH): CommandResult(
            stdout=f"Patched {resource_type} resource\n"
        ),
        (SAMPLE_SCRIPTS.FHIR_RESOURCES, RESOURCE_COMMANDS.EXECUTE_BUNDLE): CommandResult(
            stdout="Executed Bundle from file resources/bundle.json\n"
        ),
        SAMPLE_SCRIPTS.GET_RESOURCE: CommandResult(
            stdout=f'Got {resource_type} resource:\n{{"id": "{RESOURCE_ID}"}}\n'
        ),
        SAMPLE_SCRIPTS.LIST_HISTORY: CommandResult(stdout=history_output()),
        SAMPLE_SCRIPTS.GET_HISTORY: CommandResult(
            stdout=f'Got history for {resource_type} resource:\n{{"versionId": "{VERSION_ID}"}}\n'
        ),
        SAMPLE_SCRIPTS.GET_PATIENT_EVERYTHING: CommandResult(
            stdout=f"Got all resources in patient {RESOURCE_ID} compartment:\n{{}}\n"
        ),
        SAMPLE_SCRIPTS.UPDATE_RESOURCE: CommandResult(
            stdout=f"Updated {resource_type} resource:\n{{}}\n"
        ),
        SAMPLE_SCRIPTS.SEARCH_GET: CommandResult(stdout="Using GET request\nResources found: 1\n"),
        SAMPLE_SCRIPTS.SEARCH_POST: CommandResult(stdout="Using POST request\nResources found: 1\n"),
        SAMPLE_SCRIPTS.PURGE_RESOURCE: CommandResult(
            stdout=f"Deleted all historical versions of {resource_type} resource\n"
        ),
        SAMPLE_SCRIPTS.DELETE_RESOURCE: CommandResult(
            stdout=f"Deleted FHIR resource {resource_type}\n"
        ),
    }


@pytest.fixture(autouse=True)
def reset_cached_settings():
    """Reset cached settings between tests to avoid state leakage."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch) -> Settings:
    """Settings with the required environment present."""
    for name in (
        "GCLOUD_PROJECT",
        "GOOGLE_APPLICATION_CREDENTIALS",
        "FHIR_HARNESS_PROJECT_ID",
        "FHIR_HARNESS_CREDENTIALS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    return Settings(
        _env_file=None,
        project_id="test-project",
        credentials_path="/secrets/service-account.json",
        samples_dir=tmp_path / "fhir",
        datasets_dir=tmp_path / "datasets",
        interpreter="python3",
    )


@pytest.fixture
def context() -> TestContext:
    """Context with fixed IDs and nothing captured yet."""
    return TestContext(
        project_id="test-project",
        region="us-central1",
        dataset_id="test_dataset",
        fhir_store_id="test_fhir_store",
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Runner whose samples all print their success output."""
    return FakeRunner(passing_responses())
