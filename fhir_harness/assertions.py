"""
Checks on the human-readable output of the sample scripts.

Each check raises ``OutputMismatchError`` when the output does not satisfy
it, so a failed check fails only the step that made it.
"""

import re

import pydantic

from fhir_harness.errors import OutputMismatchError
from fhir_harness.models import HistoryBundle


def expect_match(output: str, pattern: str | re.Pattern[str]) -> re.Match[str]:
    """Search ``output`` for ``pattern`` and return the match."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    match = compiled.search(output)
    if match is None:
        raise OutputMismatchError(f"a match for /{compiled.pattern}/", output)
    return match


def expect_contains(output: str, text: str) -> None:
    if text not in output:
        raise OutputMismatchError(f"output containing {text!r}", output)


def expect_exact(output: str, expected: str) -> None:
    """
    Require ``output`` to equal ``expected``.

    Only trailing line terminators are ignored, so "Patched Patient resource\\n"
    passes while "Patched Patient resource!" does not.
    """
    if output.rstrip("\r\n") != expected:
        raise OutputMismatchError(f"exactly {expected!r}", output)


def created_resource_pattern(resource_type: str) -> re.Pattern[str]:
    return re.compile(rf"Created FHIR resource {re.escape(resource_type)} with ID (.*)\.")


def extract_resource_id(output: str, resource_type: str) -> str:
    """
    Pull the new resource's ID out of the create-resource output.

    Example:
        >>> extract_resource_id("Created FHIR resource Patient with ID abc-123.", "Patient")
        'abc-123'
    """
    match = expect_match(output, created_resource_pattern(resource_type))
    return match.group(1)


def extract_version_id(output: str) -> str:
    """
    Read ``entry[0].resource.meta.versionId`` from history output.

    Raises:
        OutputMismatchError: If the output is not a history bundle or the
            first entry carries no version ID
    """
    expect_contains(output, "versionId")

    try:
        bundle = HistoryBundle.model_validate_json(output)
    except pydantic.ValidationError as e:
        raise OutputMismatchError("a JSON history bundle", output) from e

    if not bundle.entry:
        raise OutputMismatchError("a history bundle with at least one entry", output)

    resource = bundle.entry[0].resource
    if resource is None or resource.meta is None or not resource.meta.versionId:
        raise OutputMismatchError("entry[0].resource.meta.versionId", output)

    return resource.meta.versionId
