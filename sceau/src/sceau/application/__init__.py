"""
Application layer - Orchestration and use cases.
"""
