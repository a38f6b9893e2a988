# Custom exceptions for ngreflector

class ReflectorError(Exception):
    """Base exception for all application-specific errors."""
    pass

class DependencyReadError(ReflectorError):
    """Raised when a constructor or function parameter list cannot be statically read."""
    def __init__(self, element: str, message: str):
        self.element = element
        self.message = message
        super().__init__(f"Cannot read dependencies of {element}: {message}")

class MalformedUriError(ReflectorError):
    """Raised when a directive URI has no extension separator to rewrite."""
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"URI '{uri}' has no file extension; cannot compute its generated file")

class ConfigError(ReflectorError):
    """Raised for configuration-related problems."""
    pass
