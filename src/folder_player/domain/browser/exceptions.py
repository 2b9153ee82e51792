"""File browser exceptions."""


class BrowserError(Exception):
    """Base exception for browsing operations."""

    pass


class DirectoryUnavailableError(BrowserError):
    """Raised when a directory does not exist or cannot be listed."""

    def __init__(self, directory: str, message: str = None):
        self.directory = directory
        super().__init__(message or f"Cannot open directory: {directory}")


class MetadataReadError(BrowserError):
    """Raised when a track's metadata cannot be resolved."""

    def __init__(self, path: str, message: str = None):
        self.path = path
        super().__init__(message or f"Cannot read metadata: {path}")
