"""Tests for the FastAPI plan endpoints."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from bypass_perm.api.app import create_app
from bypass_perm.emitter.writer import FileEmitter


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "customPermissions"


@pytest.fixture
def client(output_dir):
    """Create a test client over an empty output directory."""
    return TestClient(create_app(output_dir=output_dir))


class TestPlanEndpoints:
    def test_list_automations(self, client):
        response = client.get("/automations")
        assert response.status_code == 200
        assert response.json() == ["VR", "Flow", "Trigger"]

    def test_plan_gaps(self, client, output_dir):
        response = client.post("/gaps", json={
            "objects": ["Account", "Case"],
            "kinds": ["Trigger", "VR"],
            "existing": ["ByPass_Case_VR", "ByPass_Case_Trigger"],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["gaps"] == {"Account": ["VR", "Trigger"]}
        assert data["permissions"] == ["ByPass_Account_VR", "ByPass_Account_Trigger"]
        assert not output_dir.exists()

    def test_plan_defaults_to_all_kinds(self, client):
        data = client.post("/gaps", json={"objects": ["Lead"]}).json()
        assert data["gaps"] == {"Lead": ["VR", "Flow", "Trigger"]}

    def test_unknown_kind_rejected(self, client):
        response = client.post("/gaps", json={"objects": ["Lead"], "kinds": ["Workflow"]})
        assert response.status_code == 422

    def test_generate_then_inventory(self, client, output_dir):
        response = client.post("/generate", json={"objects": ["Account"], "kinds": ["Flow"]})
        assert response.status_code == 200
        assert response.json()["written_paths"] == [
            str(output_dir / "ByPass_Account_Flow.customPermission-meta.xml")
        ]

        assert client.get("/inventory").json() == ["ByPass_Account_Flow"]
        again = client.post("/gaps", json={"objects": ["Account"], "kinds": ["Flow"]}).json()
        assert again["gaps"] == {}

    def test_generate_reports_failed_writes(self, output_dir):
        def writer(path: Path, text: str) -> None:
            raise PermissionError(13, "Permission denied", str(path))

        app = create_app(output_dir=output_dir, emitter=FileEmitter(output_dir, writer=writer))
        response = TestClient(app).post("/generate", json={"objects": ["Account"], "kinds": ["VR"]})

        assert response.status_code == 500
        assert response.json()["detail"]["failed"] == ["ByPass_Account_VR"]

    def test_package_dirs_scanned(self, tmp_path, output_dir):
        pkg = tmp_path / "force-app"
        pkg.mkdir()
        (pkg / "ByPass_Account_VR.customPermission-meta.xml").write_text("<x/>")

        client = TestClient(create_app(output_dir=output_dir, package_dirs=[pkg]))
        data = client.post("/gaps", json={"objects": ["Account"], "kinds": ["VR", "Flow"]}).json()
        assert data["gaps"] == {"Account": ["Flow"]}

    def test_generate_into_blocked_output_dir(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        client = TestClient(create_app(output_dir=blocker / "out"))
        response = client.post("/generate", json={"objects": ["Account"], "kinds": ["VR", "Trigger"]})

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["failed"] == ["ByPass_Account_VR", "ByPass_Account_Trigger"]
        assert detail["written"] == []
