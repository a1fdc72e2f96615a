"""
Pytest Configuration and Fixtures

Shared fixtures: isolated settings, an in-memory Mongo database (mongomock),
a recording HTTP transport (httpx.MockTransport) and small builders for
forms, submissions and workflow steps.
"""
import mongomock
import pytest

from formflow.config.settings import Settings
from formflow.domain.models import FormDefinition, Submission
from formflow.engine.context import WorkflowContext
from formflow.repositories.record_repo import RecordRepository

from .builders import RecordingTransport


@pytest.fixture
def settings() -> Settings:
    """Settings with no transport credentials configured"""
    return Settings(
        _env_file=None,
        smtp_host="",
        smtp_user="",
        smtp_pass="",
        twilio_account_sid="",
        twilio_auth_token="",
        twilio_from_number="",
        slack_webhook_url="",
        push_gateway_url="",
        push_gateway_api_key="",
    )


@pytest.fixture
def configured_settings() -> Settings:
    """Settings with every transport configured"""
    return Settings(
        _env_file=None,
        smtp_host="smtp.example.com",
        smtp_user="mailer@example.com",
        smtp_pass="secret",
        smtp_from="forms@example.com",
        twilio_account_sid="AC123",
        twilio_auth_token="token",
        twilio_from_number="+15550000000",
        slack_webhook_url="https://hooks.slack.test/services/T000/B000/XXX",
        push_gateway_url="https://push.example.com/send",
        push_gateway_api_key="push-key",
    )


@pytest.fixture
def mongo_db():
    """Fresh in-memory database per test"""
    return mongomock.MongoClient()["formflow_test"]


@pytest.fixture
def record_sink(mongo_db) -> RecordRepository:
    return RecordRepository(database=mongo_db)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def form() -> FormDefinition:
    return FormDefinition.model_validate({
        "id": "form_contact",
        "title": "Contact Us",
        "pages": [
            {
                "id": "page1",
                "title": "Contact",
                "elements": [
                    {"id": "name", "type": "text", "label": "Name", "required": True},
                    {"id": "email", "type": "email", "label": "Email", "required": True},
                    {"id": "age", "type": "number", "label": "Age"},
                    {
                        "id": "interest", "type": "select", "label": "Interest",
                        "options": ["General Inquiry", "Sales", "Support"],
                    },
                    {"id": "topics", "type": "checkbox", "label": "Topics", "options": ["a", "b"]},
                    {"id": "submit", "type": "submit", "label": "Send"},
                ],
            }
        ],
    })


@pytest.fixture
def submission(form) -> Submission:
    return Submission(
        id="sub_123",
        form_id=form.id,
        data={
            "name": "Ada",
            "email": "ada@example.com",
            "age": "25",
            "interest": "Sales",
            "topics": [],
        },
    )


@pytest.fixture
def context(form, submission, settings) -> WorkflowContext:
    return WorkflowContext.build(submission, form, settings)

