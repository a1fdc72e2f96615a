"""
Scripts Module

Command line utilities for the workflow service.

Available scripts:
    - seed_data.py: Creates the sample contact form
    - validate_workflow.py: Validates a workflow file or stored form

Usage:
    python -m scripts.seed_data
    python -m scripts.validate_workflow --file workflow.json
"""
