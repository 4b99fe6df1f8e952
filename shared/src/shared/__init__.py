"""
Shared utilities for Sceau components.
"""
