"""
common

This package contains shared models and utilities used across the consent2api project.

Modules:
    - models: Defines shared Pydantic models used by multiple components
"""

from .models import ConsentSummary, RangeEntryModel

__all__ = ["ConsentSummary", "RangeEntryModel"]
