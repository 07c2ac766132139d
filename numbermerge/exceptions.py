"""
Exceptions raised by the number merge core.
"""


class InvalidDirection(ValueError):
    """Raised when a slide direction cannot be interpreted."""

    def __init__(self, direction):
        super().__init__(f"Invalid slide direction: {direction!r}")
        self.direction = direction
