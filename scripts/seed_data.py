"""
Seed Data Script - Creates the sample contact form with its workflow
Run: python -m scripts.seed_data
"""
from formflow.domain.models import FormDefinition
from formflow.domain.errors import AlreadyExistsError
from formflow.repositories.form_repo import FormRepository
from formflow.repositories.mongo_client import create_indexes

DEMO_FORM_ID = "demo-contact-form"

ADMIN_MESSAGE = """Hello Admin Team,

A new contact form has been submitted with the following details:

Name: {{name}}
Email: {{email}}
Company: {{company}}
Interest: {{interest}}
Message: {{message}}

Submitted at: {{timestamp}}
"""

USER_MESSAGE = """Dear {{name}},

Thank you for reaching out to us regarding {{interest}}.
We have received your message and will get back to you within 24 hours.

Your message:
{{message}}
"""

SAMPLE_FORM = {
    "id": DEMO_FORM_ID,
    "title": "Contact Us",
    "description": "Get in touch with our team",
    "pages": [
        {
            "id": "page1",
            "title": "Contact Information",
            "order": 0,
            "elements": [
                {"id": "name", "type": "text", "label": "Full Name", "required": True},
                {
                    "id": "email", "type": "email", "label": "Email Address", "required": True,
                    "validation": [{"type": "email", "message": "Please enter a valid email address"}],
                },
                {"id": "company", "type": "text", "label": "Company"},
                {
                    "id": "interest", "type": "select", "label": "Area of Interest", "required": True,
                    "options": ["General Inquiry", "Technical Support", "Sales", "Partnership"],
                },
                {"id": "message", "type": "textarea", "label": "Message", "required": True},
                {"id": "submit", "type": "submit", "label": "Send Message"},
            ],
        }
    ],
    "workflow": [
        {
            "id": "sales-check",
            "type": "condition",
            "title": "Sales Inquiry Check",
            "order": 0,
            "config": {
                "condition": {
                    "field": "interest",
                    "operator": "equals",
                    "value": "Sales",
                    "actions": [{"type": "setValue", "targetId": "priority", "value": "high"}],
                }
            },
        },
        {
            "id": "admin-notification",
            "type": "notification",
            "title": "Admin Email Notification",
            "order": 1,
            "config": {
                "notification": {
                    "type": "email",
                    "recipients": ["admin@example.com", "sales@example.com"],
                    "subject": "New Contact Form Submission - {{interest}}",
                    "message": ADMIN_MESSAGE,
                }
            },
        },
        {
            "id": "user-confirmation",
            "type": "notification",
            "title": "User Confirmation Email",
            "order": 2,
            "config": {
                "notification": {
                    "type": "email",
                    "recipients": ["{{email}}"],
                    "subject": "Thank you for contacting us!",
                    "message": USER_MESSAGE,
                }
            },
        },
        {
            "id": "crm-integration",
            "type": "action",
            "title": "CRM Integration",
            "order": 3,
            "config": {
                "action": {
                    "type": "webhook",
                    "endpoint": "https://api.example-crm.com/contacts",
                    "method": "POST",
                    "body": '{"name": "{{name}}", "email": "{{email}}", "interest": "{{interest}}", '
                            '"source": "contact-form", "created_at": "{{timestamp}}"}',
                }
            },
        },
    ],
}


def seed() -> None:
    create_indexes()
    forms = FormRepository()
    try:
        form = forms.create_form(FormDefinition.model_validate(SAMPLE_FORM))
    except AlreadyExistsError:
        print(f"Form {DEMO_FORM_ID} already exists. Skipping seed.")
        return
    print(f"✅ Created sample form: {form.title} ({form.id}) with {len(form.workflow)} workflow steps")


if __name__ == "__main__":
    seed()
