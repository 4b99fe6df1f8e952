"""
Shared testing utilities for Sceau components.

Provides standardized test structure:
- LaborantTest: Base class for all pytest test classes

All component tests SHOULD inherit from LaborantTest.
"""

from shared.tests.test_base import LaborantTest

__all__ = ["LaborantTest"]
