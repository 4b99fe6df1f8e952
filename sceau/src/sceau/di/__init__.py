"""
Dependency injection.
"""

from sceau.di.container import DIContainer, get_container, reset_container

__all__ = ["DIContainer", "get_container", "reset_container"]
