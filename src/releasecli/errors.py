from enum import Enum


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    RESOLUTION = "resolution"
    PORT_CONFLICT = "port-conflict"
    FORGE = "forge"


class ReleaseError(Exception):
    kind: ErrorKind = ErrorKind.RESOLUTION

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# Configuration errors: bad input or repository setup, reported immediately.


class ConfigurationError(ReleaseError):
    kind = ErrorKind.CONFIGURATION


class InvalidVersionError(ConfigurationError):
    pass


class NotARepositoryError(ConfigurationError):
    pass


class DirtyWorkingTreeError(ConfigurationError):
    pass


class MalformedTitleError(ConfigurationError):
    pass


# Resolution errors: a tag, branch, commit or divergence point is missing.


class ResolutionError(ReleaseError):
    kind = ErrorKind.RESOLUTION


class NoSuchBranchError(ResolutionError):
    pass


class NoSuchTagError(ResolutionError):
    pass


class ObjectNotFoundError(ResolutionError):
    pass


class NoReleasedVersionError(ResolutionError):
    pass


class DivergencePointNotFoundError(ResolutionError):
    pass


class StaleCheckoutError(ResolutionError):
    pass


class CherryPickConflictError(ReleaseError):
    kind = ErrorKind.PORT_CONFLICT


class ForgeError(ReleaseError):
    kind = ErrorKind.FORGE


class ForgeNotFoundError(ForgeError):
    pass


class ForgeRateLimitError(ForgeError):
    pass
