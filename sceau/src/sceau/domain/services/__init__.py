"""
Domain service interfaces.
"""
