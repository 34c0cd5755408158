"""
Default values shared by the harness.

This module provides the fixed run configuration and the file names of the
sample scripts the sequencer drives.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RunDefaults:
    """Fixed configuration for a harness run."""

    CLOUD_REGION: str = "us-central1"
    FHIR_VERSION: str = "STU3"
    RESOURCE_TYPE: str = "Patient"
    BUNDLE_FILE: str = "resources/bundle.json"
    DATASET_PREFIX: str = "python-docs-samples-test-"
    FHIR_STORE_PREFIX: str = "python-docs-samples-test-fhir-store"


@dataclass(frozen=True)
class SampleScripts:
    """
    File names of the sample programs.

    Dataset scripts live in the datasets directory; everything else lives in
    the FHIR samples directory. ``FHIR_RESOURCES`` is the combined script that
    takes a subcommand as its first argument.
    """

    CREATE_DATASET: str = "create_dataset.py"
    DELETE_DATASET: str = "delete_dataset.py"
    CREATE_FHIR_STORE: str = "create_fhir_store.py"
    DELETE_FHIR_STORE: str = "delete_fhir_store.py"
    FHIR_RESOURCES: str = "fhir_resources.py"
    GET_RESOURCE: str = "get_fhir_resource.py"
    LIST_HISTORY: str = "list_fhir_resource_history.py"
    GET_HISTORY: str = "get_fhir_resource_history.py"
    GET_PATIENT_EVERYTHING: str = "get_patient_everything.py"
    UPDATE_RESOURCE: str = "update_fhir_resource.py"
    SEARCH_GET: str = "search_fhir_resources_get.py"
    SEARCH_POST: str = "search_fhir_resources_post.py"
    PURGE_RESOURCE: str = "delete_fhir_resource_purge.py"
    DELETE_RESOURCE: str = "delete_fhir_resource.py"


@dataclass(frozen=True)
class ResourceCommands:
    """Subcommands of the combined resources script."""

    CREATE: str = "create-resource"
    PATCH: str = "patch-resource"
    EXECUTE_BUNDLE: str = "execute-bundle"


# Singleton instances
DEFAULTS = RunDefaults()
SAMPLE_SCRIPTS = SampleScripts()
RESOURCE_COMMANDS = ResourceCommands()

# Environment variables every sample needs
PROJECT_ENV_VAR = "GCLOUD_PROJECT"
CREDENTIALS_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"
