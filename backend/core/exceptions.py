"""
Mind map error taxonomy.

Every error that can reach the API boundary derives from MindMapError and
carries a user_message that is safe to show as-is.
"""


class MindMapError(Exception):
    """Base exception for mind map generation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.user_message = message


class ConfigurationError(MindMapError):
    """Raised when a required setting (e.g. the API key) is missing."""
    pass


class AIServiceError(MindMapError):
    """Raised when the call to the generative AI service fails."""
    pass


class InvalidApiKeyError(AIServiceError):
    """Raised when the AI service rejects the configured API key."""
    pass


class ResponseFormatError(MindMapError):
    """Raised when the AI response is not a JSON object."""

    def __init__(self, message: str, excerpt: str = ""):
        super().__init__(message)
        self.excerpt = excerpt


class TreeValidationError(MindMapError):
    """Raised when the generated tree breaks the structural limits."""

    def __init__(self, message: str, path: str = "$"):
        super().__init__(f"{message} (at {path})")
        self.path = path


class TopicValidationError(MindMapError):
    """Raised when the requested topic is empty."""
    pass


class GenerationInProgressError(MindMapError):
    """Raised when a generation is requested while another is running."""
    pass


class LayoutError(MindMapError):
    """Raised when the canvas leaves no room to draw the tree."""
    pass
