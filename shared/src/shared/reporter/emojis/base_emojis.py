"""
Base class for emoji registry components.

Provides foundation for all emoji category classes with
consistent structure and introspection support.
"""

from typing import Dict, List


class ComponentEmoji:
    """
    Base class for component-specific emoji collections.

    All emoji category classes inherit from this to maintain
    consistent structure and enable introspection capabilities.

    Design:
        - Each subclass represents a semantic category
        - Class attributes define emojis as constants
        - No instance methods needed (all class-level)

    Example:
        >>> class MyEmoji(ComponentEmoji):
        ...     HELLO = "👋"
    """

    @classmethod
    def get_all(cls) -> Dict[str, str]:
        """
        Get all emoji definitions from this category.

        Returns:
            Dictionary mapping emoji name to emoji character
        """
        return {
            name: value
            for name, value in vars(cls).items()
            if not name.startswith("_") and isinstance(value, str)
        }

    @classmethod
    def list_names(cls) -> List[str]:
        """
        Get list of all emoji names in this category.

        Returns:
            List of emoji constant names
        """
        return [
            name for name in dir(cls) if not name.startswith("_") and name.isupper()
        ]
