"""Tests for the consent_daemon API routers."""
