"""
The ordered steps of a harness run.

Every step takes the current ``TestContext`` and a ``SampleInvoker``, runs one
or more sample scripts, checks their output, and returns the (possibly
updated) context for the next step.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from fhir_harness.assertions import (
    expect_contains,
    expect_exact,
    expect_match,
    extract_resource_id,
    extract_version_id,
)
from fhir_harness.config.defaults import RESOURCE_COMMANDS, SAMPLE_SCRIPTS
from fhir_harness.context import TestContext
from fhir_harness.samples import SampleInvoker

StepFunction = Callable[[TestContext, SampleInvoker], TestContext]


@dataclass(frozen=True)
class Step:
    """A named, described unit of the sequence."""

    name: str
    description: str
    run: StepFunction


def _store_args(ctx: TestContext) -> tuple[str, str, str, str]:
    return (ctx.project_id, ctx.region, ctx.dataset_id, ctx.fhir_store_id)


# Setup and teardown


def create_dataset(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    samples.run_dataset_script(
        SAMPLE_SCRIPTS.CREATE_DATASET, ctx.project_id, ctx.region, ctx.dataset_id
    )
    return ctx


def delete_dataset(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    samples.run_dataset_script(
        SAMPLE_SCRIPTS.DELETE_DATASET, ctx.project_id, ctx.region, ctx.dataset_id
    )
    return ctx


def create_fhir_store(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    samples.run(SAMPLE_SCRIPTS.CREATE_FHIR_STORE, *_store_args(ctx), ctx.fhir_version)
    return ctx.update(fhir_store_created=True)


def delete_fhir_store(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    samples.run(SAMPLE_SCRIPTS.DELETE_FHIR_STORE, *_store_args(ctx))
    return ctx.update(fhir_store_created=False)


# Resource operations


def create_resource(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    output = samples.run(
        SAMPLE_SCRIPTS.FHIR_RESOURCES,
        RESOURCE_COMMANDS.CREATE,
        ctx.dataset_id,
        ctx.fhir_store_id,
        ctx.resource_type,
    )
    return ctx.update(resource_id=extract_resource_id(output, ctx.resource_type))


def get_resource(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    output = samples.run(
        SAMPLE_SCRIPTS.GET_RESOURCE, *_store_args(ctx), ctx.resource_type, resource_id
    )
    expect_contains(output, f"Got {ctx.resource_type} resource")
    return ctx


def list_history(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    output = samples.run(
        SAMPLE_SCRIPTS.LIST_HISTORY, *_store_args(ctx), ctx.resource_type, resource_id
    )
    # The version ID is generated by the server, so it has to come from here
    return ctx.update(version_id=extract_version_id(output))


def get_history_version(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    version_id = ctx.require_version_id()
    output = samples.run(
        SAMPLE_SCRIPTS.GET_HISTORY,
        *_store_args(ctx),
        ctx.resource_type,
        resource_id,
        version_id,
    )
    expect_contains(output, version_id)
    return ctx


def get_patient_everything(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    output = samples.run(SAMPLE_SCRIPTS.GET_PATIENT_EVERYTHING, *_store_args(ctx), resource_id)
    expect_match(output, rf"Got all resources in patient {re.escape(resource_id)} compartment")
    return ctx


def update_resource(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    output = samples.run(
        SAMPLE_SCRIPTS.UPDATE_RESOURCE, *_store_args(ctx), ctx.resource_type, resource_id
    )
    expect_match(output, rf"Updated {re.escape(ctx.resource_type)} resource")
    return ctx


def patch_resource(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    output = samples.run(
        SAMPLE_SCRIPTS.FHIR_RESOURCES,
        RESOURCE_COMMANDS.PATCH,
        ctx.dataset_id,
        ctx.fhir_store_id,
        ctx.resource_type,
        resource_id,
    )
    expect_exact(output, f"Patched {ctx.resource_type} resource")
    return ctx


def search_resources_get(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    output = samples.run(SAMPLE_SCRIPTS.SEARCH_GET, *_store_args(ctx), ctx.resource_type)
    expect_match(output, "Resources found")
    return ctx


def search_resources_post(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    output = samples.run(SAMPLE_SCRIPTS.SEARCH_POST, *_store_args(ctx), ctx.resource_type)
    expect_match(output, "Resources found")
    return ctx


def purge_resource(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    output = samples.run(
        SAMPLE_SCRIPTS.PURGE_RESOURCE, *_store_args(ctx), ctx.resource_type, resource_id
    )
    expect_exact(output, f"Deleted all historical versions of {ctx.resource_type} resource")
    return ctx


def execute_bundle(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    output = samples.run(
        SAMPLE_SCRIPTS.FHIR_RESOURCES,
        RESOURCE_COMMANDS.EXECUTE_BUNDLE,
        ctx.dataset_id,
        ctx.fhir_store_id,
        ctx.bundle_file,
    )
    expect_match(output, "Executed Bundle")
    return ctx


def delete_resource(ctx: TestContext, samples: SampleInvoker) -> TestContext:
    resource_id = ctx.require_resource_id()
    output = samples.run(
        SAMPLE_SCRIPTS.DELETE_RESOURCE, *_store_args(ctx), ctx.resource_type, resource_id
    )
    expect_exact(output, f"Deleted FHIR resource {ctx.resource_type}")
    return ctx


SETUP = Step("create_dataset", "should create a dataset", create_dataset)

STEPS: tuple[Step, ...] = (
    Step("create_fhir_store", "should create a FHIR store", create_fhir_store),
    Step("create_resource", "should create a FHIR resource", create_resource),
    Step("get_resource", "should get a FHIR resource", get_resource),
    Step("list_history", "should list a FHIR resource history", list_history),
    Step("get_history_version", "should get a FHIR resource version", get_history_version),
    Step(
        "get_patient_everything",
        "should get everything in Patient compartment",
        get_patient_everything,
    ),
    Step("update_resource", "should update a FHIR resource", update_resource),
    Step("patch_resource", "should patch a FHIR resource", patch_resource),
    Step("search_resources_get", "should search for FHIR resources using GET", search_resources_get),
    Step(
        "search_resources_post",
        "should search for FHIR resources using POST",
        search_resources_post,
    ),
    Step(
        "purge_resource",
        "should purge all historical versions of a FHIR resource",
        purge_resource,
    ),
    Step("execute_bundle", "should execute a Bundle", execute_bundle),
    Step("delete_resource", "should delete a FHIR resource", delete_resource),
    Step("delete_fhir_store", "should delete the FHIR store", delete_fhir_store),
)
