"""
Test Suite

Structure:
    tests/
    ├── __init__.py
    ├── conftest.py         # Pytest fixtures
    ├── builders.py         # Step / transport builders
    ├── unit/
    │   ├── test_engine/    # Templates, conditions, executors, engine, validator
    │   ├── test_services/  # Notification, submission, tester services
    │   └── test_repositories/
    └── integration/
        └── test_api/       # API endpoint tests

To run tests:
    pytest tests/
    pytest tests/unit/
    pytest tests/integration/
"""
