"""
tests

Test suite for the consent2api project.

This package contains unit, integration, and end-to-end tests for all
components of the consent2api project, including the consent decoder and
the API daemon.

Subpackages:
    - consent_daemon: Tests for the FastAPI backend
    - integration: End-to-end and cross-component tests
"""
