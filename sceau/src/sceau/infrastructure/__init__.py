"""
Infrastructure layer - Adapters for wallet providers, HTTP and storage.
"""
