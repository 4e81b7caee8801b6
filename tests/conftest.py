"""Pytest bootstrap configuration.

Ensure Paynow environment variables are set before test collection
and module imports that depend on application settings.
"""
import os

os.environ.setdefault("PAYNOW_INTEGRATION_ID", "test-id")
os.environ.setdefault("PAYNOW_INTEGRATION_KEY", "test-integration-key")
os.environ.setdefault("PAYNOW_RESULT_URL", "https://example.com/result")
os.environ.setdefault("PAYNOW_RETURN_URL", "https://example.com/return")
