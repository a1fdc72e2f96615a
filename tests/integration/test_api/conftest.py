"""API fixtures: the real app with mongomock repositories and a stubbed notification layer"""
import pytest
from fastapi.testclient import TestClient

from formflow.api import deps
from formflow.engine.engine import WorkflowEngine
from formflow.main import app
from formflow.repositories.form_repo import FormRepository
from formflow.repositories.submission_repo import SubmissionRepository
from formflow.repositories.workflow_log_repo import WorkflowLogRepository
from tests.builders import StubNotifications


@pytest.fixture
def notifications():
    return StubNotifications()


@pytest.fixture
def client(mongo_db, settings, record_sink, notifications):
    """TestClient without lifespan, so no real MongoDB or HTTP client is opened"""
    app.dependency_overrides[deps.get_form_repository] = lambda: FormRepository(mongo_db["forms"])
    app.dependency_overrides[deps.get_submission_repository] = lambda: SubmissionRepository(mongo_db["submissions"])
    app.dependency_overrides[deps.get_workflow_log_repository] = (
        lambda: WorkflowLogRepository(mongo_db["workflow_logs"])
    )
    app.dependency_overrides[deps.get_workflow_engine] = lambda: WorkflowEngine(
        settings, notification_service=notifications, record_sink=record_sink
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
