"""
Tests for the command-line entry point.
"""

import json

import pytest
from conftest import FakeRunner, passing_responses

from fhir_harness import cli
from fhir_harness.config.defaults import RESOURCE_COMMANDS, SAMPLE_SCRIPTS
from fhir_harness.config.settings import get_settings
from fhir_harness.runner import CommandResult
from fhir_harness.sequencer import TestSequencer


@pytest.fixture
def cloud_env(monkeypatch):
    monkeypatch.setenv("GCLOUD_PROJECT", "cli-project")
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "/keys/sa.json")
    return monkeypatch


@pytest.fixture
def fake_sequencer(cloud_env):
    """Swap the real subprocess runner for canned sample output."""
    runners = []

    def install(responses=None):
        def build(settings):
            runner = FakeRunner(responses or passing_responses())
            runners.append(runner)
            return TestSequencer(settings, runner)

        cloud_env.setattr(cli, "TestSequencer", build)
        return runners

    return install


class TestLoadSettings:
    def test_overrides_only_given_options(self, cloud_env):
        args = cli.build_parser().parse_args(["--region", "asia-east1", "--timeout", "5"])
        settings = cli.load_settings(args)
        assert settings.cloud_region == "asia-east1"
        assert settings.command_timeout == 5.0
        assert settings.fhir_version == "STU3"
        assert settings.project_id == "cli-project"

    def test_uses_cached_settings_without_options(self, cloud_env):
        args = cli.build_parser().parse_args([])
        assert cli.load_settings(args) is get_settings()

    def test_options_bypass_cache(self, cloud_env):
        args = cli.build_parser().parse_args(["--fhir-version", "R4"])
        settings = cli.load_settings(args)
        assert settings is not get_settings()
        assert settings.fhir_version == "R4"


class TestMain:
    def test_summary_on_success(self, fake_sequencer, capsys):
        fake_sequencer()
        assert cli.main([]) == cli.EXIT_OK

        out = capsys.readouterr().out
        assert "PASS  should create a dataset" in out
        assert "PASS  should delete a FHIR resource" in out
        assert "Failed: 0" in out

    def test_json_report(self, fake_sequencer, capsys):
        fake_sequencer()
        assert cli.main(["--json"]) == cli.EXIT_OK

        report = json.loads(capsys.readouterr().out)
        assert report["passed"] is True
        assert report["project_id"] == "cli-project"
        assert report["resource_id"] == "abc-123"

    def test_writes_output_file(self, fake_sequencer, tmp_path):
        fake_sequencer()
        output = tmp_path / "reports" / "run.json"
        cli.main(["--output", str(output)])

        assert json.loads(output.read_text())["passed"] is True

    def test_failed_step_exit_code(self, fake_sequencer, capsys):
        responses = passing_responses()
        responses[(SAMPLE_SCRIPTS.FHIR_RESOURCES, RESOURCE_COMMANDS.PATCH)] = CommandResult(
            stdout="Patched Patient resource!"
        )
        fake_sequencer(responses)

        assert cli.main([]) == cli.EXIT_FAILED
        out = capsys.readouterr().out
        assert "FAIL  should patch a FHIR resource" in out
        assert "Failed: 1" in out

    def test_resource_type_is_forwarded(self, fake_sequencer):
        runners = fake_sequencer(passing_responses("Observation"))
        assert cli.main(["--resource-type", "Observation"]) == cli.EXIT_OK
        create = runners[0].calls[2]["args"]
        assert create[:2] == [SAMPLE_SCRIPTS.FHIR_RESOURCES, RESOURCE_COMMANDS.CREATE]
        assert create[-1] == "Observation"

    def test_missing_environment(self, monkeypatch, capsys):
        for name in ("GCLOUD_PROJECT", "FHIR_HARNESS_PROJECT_ID"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "/keys/sa.json")

        assert cli.main([]) == cli.EXIT_CONFIG
        assert "Must set GCLOUD_PROJECT environment variable!" in capsys.readouterr().err

    def test_invalid_option(self, cloud_env, capsys):
        assert cli.main(["--resource-type", "patient"]) == cli.EXIT_CONFIG
        assert "Invalid configuration" in capsys.readouterr().err
