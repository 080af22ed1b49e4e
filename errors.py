"""
errors.py

Exception hierarchy for the joint canvas.

Only configuration and viewport failures are exceptions. Lookups return
``None`` and rejected connections return ``models.Rejected``.
"""


class JointError(Exception):
    """Base exception for all joint canvas errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SceneConfigurationError(JointError):
    """The scene root is missing or does not provide the scene interface.

    Raised at construction time; a caller contract violation, never
    recovered from.
    """


class ViewportError(JointError):
    """Base class for pan/zoom viewport failures."""


class InvalidViewportError(ViewportError):
    """The viewport reported a scale that cannot be inverted (zero)."""


class ViewportUnavailableError(ViewportError):
    """The viewport provider is missing or could not be queried."""
