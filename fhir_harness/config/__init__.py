"""Configuration modules for the FHIR samples harness."""

from fhir_harness.config.defaults import DEFAULTS, SAMPLE_SCRIPTS, SampleScripts
from fhir_harness.config.logging import configure_logging, get_logger
from fhir_harness.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "DEFAULTS",
    "SAMPLE_SCRIPTS",
    "SampleScripts",
    "configure_logging",
    "get_logger",
]
