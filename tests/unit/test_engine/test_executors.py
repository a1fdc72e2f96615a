"""Step executor tests

Each executor is exercised in isolation with an httpx.MockTransport client,
an in-memory record sink and a stub notification service.
"""
import json

import httpx
import pytest

from formflow.domain.errors import NotificationNotConfiguredError
from formflow.engine.action_executor import ActionExecutor
from formflow.engine.condition_executor import ConditionExecutor
from formflow.engine.integration_executor import IntegrationExecutor
from formflow.engine.notification_executor import NotificationExecutor
from tests.builders import RecordingTransport, StubNotifications, make_step, redirect_step


# =============================================================================
# Condition
# =============================================================================

class TestConditionExecutor:

    @pytest.mark.asyncio
    async def test_met_condition_records_actions(self, settings, context):
        step = make_step(
            "condition", field="interest", operator="equals", value="Sales",
            actions=[{"type": "show", "targetId": "budget"}],
        )
        outcome = await ConditionExecutor(settings).execute(step, context)
        assert outcome.success
        assert outcome.logs == [
            "Condition met: interest equals 'Sales'",
            "Condition met, recording action: show -> budget",
        ]

    @pytest.mark.asyncio
    async def test_unmet_condition_still_succeeds(self, settings, context):
        step = make_step("condition", field="age", operator="greaterThan", value="30")
        outcome = await ConditionExecutor(settings).execute(step, context)
        assert outcome.success
        assert outcome.logs[0].startswith("Condition not met")

    @pytest.mark.asyncio
    async def test_missing_configuration(self, settings, context):
        outcome = await ConditionExecutor(settings).execute(make_step("condition"), context)
        assert not outcome.success
        assert outcome.error == "No condition configuration found"

    @pytest.mark.asyncio
    async def test_unknown_field(self, settings, context):
        step = make_step("condition", field="phone", operator="isEmpty")
        outcome = await ConditionExecutor(settings).execute(step, context)
        assert outcome.error == "Unknown condition field: phone"

    @pytest.mark.asyncio
    async def test_unknown_operator(self, settings, context):
        step = make_step("condition", field="name", operator="between")
        outcome = await ConditionExecutor(settings).execute(step, context)
        assert outcome.error == "Unknown condition operator: between"


# =============================================================================
# Notification
# =============================================================================

class TestNotificationExecutor:

    def _executor(self, settings, stub):
        return NotificationExecutor(settings, notification_service=stub)

    @pytest.mark.asyncio
    async def test_email_resolves_templates_and_attaches_data(self, settings, context):
        stub = StubNotifications()
        step = make_step(
            "notification", type="email", recipients=["{{email}}", "admin@example.com"],
            subject="Hello {{name}}", message="<p>{{interest}}</p>",
        )
        outcome = await self._executor(settings, stub).execute(step, context)

        assert outcome.success
        assert outcome.logs == ["Email sent to 2 recipient(s)"]
        name, (recipients, subject, body, attachments) = stub.calls[0]
        assert name == "email"
        assert recipients == ["ada@example.com", "admin@example.com"]
        assert subject == "Hello Ada"
        assert body == "<p>Sales</p>"
        assert attachments[0]["filename"] == "submission-data.json"
        assert json.loads(attachments[0]["content"])["name"] == "Ada"

    @pytest.mark.asyncio
    async def test_email_subject_defaults_to_form_title(self, settings, context):
        stub = StubNotifications()
        step = make_step("notification", type="email", recipients=["a@example.com"], message="hi")
        await self._executor(settings, stub).execute(step, context)
        assert stub.calls[0][1][1] == "New submission: Contact Us"

    @pytest.mark.asyncio
    async def test_recipients_resolving_to_blank_are_dropped(self, settings, context):
        stub = StubNotifications()
        step = make_step("notification", type="sms", recipients=["{{missingPhone}}", "  "], message="hi")
        # Unknown placeholders stay literal, so only the blank entry is dropped
        outcome = await self._executor(settings, stub).execute(step, context)
        assert outcome.success
        assert stub.calls[0][1][0] == ["{{missingPhone}}"]

    @pytest.mark.asyncio
    async def test_no_recipients(self, settings, context):
        stub = StubNotifications()
        step = make_step("notification", type="email", recipients=[], message="hi")
        outcome = await self._executor(settings, stub).execute(step, context)
        assert outcome.error == "No recipients specified"
        assert stub.calls == []

    @pytest.mark.asyncio
    async def test_no_message(self, settings, context):
        step = make_step("notification", type="email", recipients=["a@example.com"])
        outcome = await self._executor(settings, StubNotifications()).execute(step, context)
        assert outcome.error == "No message specified"

    @pytest.mark.asyncio
    async def test_unsupported_type(self, settings, context):
        step = make_step("notification", type="fax", recipients=["a"], message="hi")
        outcome = await self._executor(settings, StubNotifications()).execute(step, context)
        assert outcome.error == "Unsupported notification type: fax"

    @pytest.mark.asyncio
    async def test_slack_payload_defaults(self, settings, context):
        stub = StubNotifications()
        step = make_step("notification", type="slack", recipients=["#leads"], message="New lead {{name}}")
        outcome = await self._executor(settings, stub).execute(step, context)

        assert outcome.logs == ["Slack message posted to #leads"]
        _, (webhook_url, payload) = stub.calls[0]
        assert webhook_url is None
        assert payload == {
            "text": "New lead Ada",
            "channel": "#leads",
            "username": "Form Builder",
            "icon_emoji": ":robot_face:",
        }

    @pytest.mark.asyncio
    async def test_push_title_defaults_to_form_title(self, settings, context):
        stub = StubNotifications()
        step = make_step("notification", type="push", recipients=["device-1"], message="hi")
        outcome = await self._executor(settings, stub).execute(step, context)
        assert outcome.logs == ["Push notification sent to 1 recipient(s)"]
        assert stub.calls[0][1][1] == "Contact Us"

    @pytest.mark.asyncio
    async def test_transport_error_becomes_failure(self, settings, context):
        stub = StubNotifications(error=NotificationNotConfiguredError("SMS configuration missing"))
        step = make_step("notification", type="sms", recipients=["+15551234567"], message="hi")
        outcome = await self._executor(settings, stub).execute(step, context)
        assert not outcome.success
        assert outcome.error == "SMS configuration missing"


# =============================================================================
# Action
# =============================================================================

class TestActionExecutor:

    @pytest.mark.asyncio
    async def test_webhook_default_body(self, settings, context, record_sink):
        transport = RecordingTransport()
        step = make_step("action", type="webhook", endpoint="https://hooks.example.com/{{interest}}")
        async with transport.client() as client:
            outcome = await ActionExecutor(settings, client, record_sink=record_sink).execute(step, context)

        assert outcome.success
        assert outcome.logs == ["Webhook POST https://hooks.example.com/Sales returned 200"]
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/json"
        body = json.loads(request.content)
        assert body["formId"] == "form_contact"
        assert body["submissionId"] == "sub_123"
        assert body["formData"]["email"] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_webhook_body_template_and_headers(self, settings, context, record_sink):
        transport = RecordingTransport()
        step = make_step(
            "action", type="webhook", endpoint="https://hooks.example.com/in", method="put",
            headers={"X-Token": "abc"}, body='{"who": "{{name}}"}',
        )
        async with transport.client() as client:
            await ActionExecutor(settings, client, record_sink=record_sink).execute(step, context)

        request = transport.requests[0]
        assert request.method == "PUT"
        assert request.headers["x-token"] == "abc"
        assert json.loads(request.content) == {"who": "Ada"}

    @pytest.mark.asyncio
    async def test_webhook_get_sends_no_body(self, settings, context, record_sink):
        transport = RecordingTransport()
        step = make_step("action", type="webhook", endpoint="https://hooks.example.com/ping", method="GET")
        async with transport.client() as client:
            outcome = await ActionExecutor(settings, client, record_sink=record_sink).execute(step, context)
        assert outcome.success
        assert transport.requests[0].content == b""

    @pytest.mark.asyncio
    async def test_webhook_non_2xx(self, settings, context, record_sink):
        transport = RecordingTransport(lambda request: httpx.Response(500))
        step = make_step("action", type="webhook", endpoint="https://hooks.example.com/in")
        async with transport.client() as client:
            outcome = await ActionExecutor(settings, client, record_sink=record_sink).execute(step, context)
        assert outcome.error == "Webhook failed: 500 Internal Server Error"

    @pytest.mark.asyncio
    async def test_webhook_unknown_method(self, settings, context, record_sink):
        transport = RecordingTransport()
        step = make_step("action", type="webhook", endpoint="https://hooks.example.com/in", method="FETCH")
        async with transport.client() as client:
            outcome = await ActionExecutor(settings, client, record_sink=record_sink).execute(step, context)
        assert outcome.error == "Unsupported HTTP method: FETCH"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_webhook_transport_error(self, settings, context, record_sink):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = RecordingTransport(refuse)
        step = make_step("action", type="webhook", endpoint="https://hooks.example.com/in")
        async with transport.client() as client:
            outcome = await ActionExecutor(settings, client, record_sink=record_sink).execute(step, context)
        assert outcome.error == "Webhook error: connection refused"

    @pytest.mark.asyncio
    async def test_webhook_requires_valid_endpoint(self, settings, context, record_sink):
        executor = ActionExecutor(settings, record_sink=record_sink)
        missing = await executor.execute(make_step("action", type="webhook"), context)
        relative = await executor.execute(make_step("action", type="webhook", endpoint="/relative"), context)
        assert missing.error == "Webhook endpoint is required"
        assert relative.error == "Invalid webhook URL: /relative"

    @pytest.mark.asyncio
    async def test_redirect(self, settings, context, record_sink):
        step = redirect_step("Go", "https://example.com/thanks?name={{name}}")
        outcome = await ActionExecutor(settings, record_sink=record_sink).execute(step, context)
        assert outcome.success
        assert outcome.redirect_url == "https://example.com/thanks?name=Ada"

    @pytest.mark.asyncio
    async def test_redirect_without_url_succeeds_without_target(self, settings, context, record_sink):
        outcome = await ActionExecutor(settings, record_sink=record_sink).execute(
            make_step("action", type="redirect"), context
        )
        assert outcome.success is True
        assert outcome.error is None
        assert outcome.redirect_url is None

    @pytest.mark.asyncio
    async def test_database_upserts_record(self, settings, context, record_sink):
        step = make_step("action", type="database", tableName="leads", additionalFields={"source": "web"})
        executor = ActionExecutor(settings, record_sink=record_sink)

        first = await executor.execute(step, context)
        second = await executor.execute(step, context)

        assert first.success and second.success
        assert first.logs == second.logs
        assert first.logs[0].endswith("to leads")
        stored = record_sink.get_record("form_contact", "sub_123", table_name="leads")
        assert stored["formData"]["name"] == "Ada"
        assert stored["source"] == "web"
        assert record_sink._db()["leads"].count_documents({}) == 1

    @pytest.mark.asyncio
    async def test_database_into_reserved_table_fails(self, settings, context, record_sink):
        step = make_step("action", type="database", tableName="workflow_logs")
        outcome = await ActionExecutor(settings, record_sink=record_sink).execute(step, context)
        assert outcome.success is False
        assert outcome.error == 'Database save error: Table name "workflow_logs" is reserved'

    @pytest.mark.asyncio
    async def test_calculation(self, settings, form, record_sink):
        from formflow.domain.models import Submission
        from formflow.engine.context import WorkflowContext

        ctx = WorkflowContext.build(
            Submission(id="sub_9", form_id=form.id, data={"qty": 3, "price": "2.5"}), form, settings
        )
        step = make_step("action", type="calculation", formula="{{qty}} * {{price}}", targetField="total")
        outcome = await ActionExecutor(settings, record_sink=record_sink).execute(step, ctx)
        assert outcome.logs == ["Calculated total = 7.5"]

    @pytest.mark.asyncio
    async def test_calculation_error(self, settings, context, record_sink):
        step = make_step("action", type="calculation", formula="{{name}} * 2")
        outcome = await ActionExecutor(settings, record_sink=record_sink).execute(step, context)
        assert outcome.error.startswith("Calculation failed: Unknown name in formula")

    @pytest.mark.asyncio
    async def test_calculation_with_huge_submitted_power_fails(self, settings, form, record_sink):
        from formflow.domain.models import Submission
        from formflow.engine.context import WorkflowContext

        ctx = WorkflowContext.build(
            Submission(id="sub_9", form_id=form.id, data={"q": "(((9**99)**99)**99)**99"}), form, settings
        )
        step = make_step("action", type="calculation", formula="{{q}} + 1")
        outcome = await ActionExecutor(settings, record_sink=record_sink).execute(step, ctx)
        assert outcome.success is False
        assert outcome.error.startswith("Calculation failed: Formula could not be evaluated")

    @pytest.mark.asyncio
    async def test_unsupported_action_type(self, settings, context, record_sink):
        outcome = await ActionExecutor(settings, record_sink=record_sink).execute(
            make_step("action", type="email"), context
        )
        assert outcome.error == "Unsupported action type: email"


# =============================================================================
# Integration
# =============================================================================

class TestIntegrationExecutor:

    @pytest.mark.asyncio
    async def test_zapier_payload(self, settings, context):
        transport = RecordingTransport()
        step = make_step(
            "integration", service="zapier", endpoint="https://hooks.zapier.com/abc",
            mapping={"contact": "{{name}} <{{email}}>"}, additionalData={"source": "{{formTitle}}"},
            apiKey="k1",
        )
        async with transport.client() as client:
            outcome = await IntegrationExecutor(settings, client).execute(step, context)

        assert outcome.logs == ["Zapier integration delivered (200)"]
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.headers["authorization"] == "Bearer k1"
        payload = json.loads(request.content)
        assert payload["contact"] == "Ada <ada@example.com>"
        assert payload["source"] == "Contact Us"
        assert payload["formData"]["interest"] == "Sales"
        assert payload["submissionId"] == "sub_123"
        assert payload["submittedAt"].endswith("Z")

    @pytest.mark.asyncio
    async def test_custom_method_and_headers(self, settings, context):
        transport = RecordingTransport()
        step = make_step(
            "integration", service="custom", endpoint="https://crm.example.com/leads",
            method="put", headers={"X-Api": "1"},
        )
        async with transport.client() as client:
            await IntegrationExecutor(settings, client).execute(step, context)
        request = transport.requests[0]
        assert request.method == "PUT"
        assert request.headers["x-api"] == "1"

    @pytest.mark.asyncio
    async def test_custom_unknown_method(self, settings, context):
        step = make_step("integration", service="custom", endpoint="https://crm.example.com/leads", method="TRACE")
        async with RecordingTransport().client() as client:
            outcome = await IntegrationExecutor(settings, client).execute(step, context)
        assert outcome.error == "Unsupported HTTP method: TRACE"

    @pytest.mark.asyncio
    async def test_non_2xx(self, settings, context):
        transport = RecordingTransport(lambda request: httpx.Response(422))
        step = make_step("integration", service="custom", endpoint="https://crm.example.com/leads")
        async with transport.client() as client:
            outcome = await IntegrationExecutor(settings, client).execute(step, context)
        assert outcome.error == "Custom integration failed: 422"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("config,error", [
        ({"service": "integromat", "endpoint": "https://x.example.com"},
         "Unsupported integration service: integromat"),
        ({"service": "custom", "endpoint": ""}, "Integration endpoint not configured"),
        ({"service": "zapier", "endpoint": "not a url"}, "Invalid endpoint URL"),
    ])
    async def test_configuration_errors(self, settings, context, config, error):
        outcome = await IntegrationExecutor(settings).execute(make_step("integration", **config), context)
        assert outcome.error == error
