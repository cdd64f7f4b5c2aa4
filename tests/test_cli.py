"""Tests for the bypass-perm command line."""

import json

import pytest
from click.testing import CliRunner

from bypass_perm.cli.main import cli
from bypass_perm.config import get_settings


@pytest.fixture
def project(tmp_path):
    """A minimal SFDX project with two local sObjects."""
    (tmp_path / "sfdx-project.json").write_text(json.dumps({
        "packageDirectories": [{"path": "force-app", "default": True}],
        "sourceApiVersion": "60.0",
    }))
    objects = tmp_path / "force-app" / "main" / "default" / "objects"
    (objects / "Account").mkdir(parents=True)
    (objects / "Invoice__c").mkdir(parents=True)
    return tmp_path


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for var in ("BYPASS_PERM_INSTANCE_URL", "BYPASS_PERM_ACCESS_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _invoke(*args):
    return CliRunner().invoke(cli, ["generate", *args])


class TestGenerateCommand:
    def test_offline_generation(self, project):
        out = project / "force-app" / "main" / "default" / "customPermissions"
        result = _invoke(
            "--offline", "--project-dir", str(project), "-d", str(out),
            "-k", "VR", "-k", "Trigger", "-s", "Invoice__c",
        )

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out.iterdir()) == [
            "ByPass_Invoice__c_Trigger.customPermission-meta.xml",
            "ByPass_Invoice__c_VR.customPermission-meta.xml",
        ]

    def test_second_run_finds_nothing_missing(self, project):
        out = project / "force-app" / "main" / "default" / "customPermissions"
        args = ("--offline", "--project-dir", str(project), "-d", str(out), "-k", "Flow", "-s", "Account")

        assert _invoke(*args).exit_code == 0
        result = _invoke(*args, "--json")

        assert result.exit_code == 0, result.output
        assert '"result": {}' in result.output
        assert len(list(out.iterdir())) == 1

    def test_json_prints_empty_success_result(self, project):
        out = project / "out"
        result = _invoke(
            "--offline", "--project-dir", str(project), "-d", str(out),
            "-k", "VR", "-s", "Account", "--json",
        )

        assert result.exit_code == 0, result.output
        assert '"status": 0' in result.output
        assert '"result": {}' in result.output
        assert "written_paths" not in result.output
        assert [p.name for p in out.iterdir()] == ["ByPass_Account_VR.customPermission-meta.xml"]

    def test_manifest_uses_project_api_version(self, project):
        manifest = project / "manifest" / "package.xml"
        result = _invoke(
            "--offline", "--project-dir", str(project), "-d", str(project / "out"),
            "-x", str(manifest), "-k", "VR", "-s", "Account",
        )

        assert result.exit_code == 0, result.output
        text = manifest.read_text(encoding="utf-8")
        assert "<members>ByPass_Account_VR</members>" in text
        assert "<version>60.0</version>" in text

    def test_apiversion_flag_overrides_project(self, project):
        manifest = project / "package.xml"
        result = _invoke(
            "--offline", "--project-dir", str(project), "-d", str(project / "out"),
            "-a", "61.0", "-x", str(manifest), "-k", "VR", "-s", "Account",
        )
        assert result.exit_code == 0, result.output
        assert "<version>61.0</version>" in manifest.read_text(encoding="utf-8")

    def test_write_failure_exits_nonzero(self, project):
        out = project / "out"
        (out / "ByPass_Account_VR.customPermission-meta.xml").mkdir(parents=True)

        result = _invoke(
            "--offline", "--project-dir", str(project), "-d", str(out),
            "-k", "VR", "-k", "Flow", "-s", "Account",
        )

        assert result.exit_code == 1
        assert "emit stage failed" in result.output
        assert "ByPass_Account_VR" in result.output
        assert (out / "ByPass_Account_Flow.customPermission-meta.xml").is_file()

    def test_partial_flags_rejected(self, project):
        result = _invoke("--offline", "--project-dir", str(project), "-k", "VR")
        assert result.exit_code == 1
        assert "must be given together" in result.output

    def test_missing_org_connection(self, project):
        result = _invoke("--project-dir", str(project), "-k", "VR", "-s", "Account")
        assert result.exit_code == 1
        assert "connect stage failed" in result.output

    def test_unknown_automation_rejected(self, project):
        result = _invoke("--offline", "--project-dir", str(project), "-k", "Workflow", "-s", "Account")
        assert result.exit_code == 2
