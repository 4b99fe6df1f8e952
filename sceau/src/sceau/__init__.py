"""
Sceau - Wallet challenge/response authentication client.
"""

__version__ = "0.1.0"
