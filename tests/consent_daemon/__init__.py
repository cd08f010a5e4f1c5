"""
tests.consent_daemon

Test suite for the consent_daemon package of consent2api.

This package contains unit tests for the components of the daemon, including
API endpoints, configuration handling, metrics and model validation.
"""
