"""FHIR samples integration harness."""

__version__ = "0.1.0"
