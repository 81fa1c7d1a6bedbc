class RoleForgeError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to builder configuration and the role manifest ---
class ConfigurationError(RoleForgeError):
    """Base class for invalid builder settings, worker counts or manifests."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the role manifest file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML role manifest is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when configuration fails structural validation (e.g., Pydantic)."""

    pass


# --- 2. Errors that occur while building a single role image ---
class BuildError(RoleForgeError):
    """Base class for errors raised while producing a role image."""

    pass


class GenerationError(BuildError):
    """Raised when role or job metadata prevents Dockerfile/script generation."""

    pass


class AssemblyError(BuildError):
    """Raised when the build context directory of a role cannot be produced."""

    pass


class BuildBackendError(BuildError):
    """Raised when the image-build backend reports a failure for an image."""

    def __init__(self, message: str, image_name: str = ""):
        super().__init__(message)
        self.image_name = image_name
