from __future__ import annotations


class PackagingError(RuntimeError):
    """Base class for failures that abort a packaging run."""


class EnvironmentMismatch(PackagingError):
    pass


class OperatorAbort(PackagingError):
    pass


class ChecksumMismatch(PackagingError):
    pass


class MissingArtifact(PackagingError):
    pass


class UnsupportedPlatform(PackagingError):
    pass


class MissingStepOutput(PackagingError):
    """A step needs the output of an earlier step that did not run."""


class CommandFailed(PackagingError):
    def __init__(self, message: str, *, returncode: int, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class NotarizationFailed(PackagingError):
    pass


class NotarizationTimeout(PackagingError):
    pass
