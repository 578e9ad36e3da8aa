"""Exception types raised by freight."""

from pathlib import Path
from typing import Optional


class FreightError(Exception):
    """Base class for every error freight reports to the user."""


class UnsupportedValueError(FreightError, ValueError):
    """A string does not name any member of a closed set of values."""


class ManifestError(FreightError):
    """The manifest is malformed or incomplete."""


class ProjectShapeError(FreightError):
    """The project layout does not support the requested operation."""


class NothingToCompileError(ProjectShapeError):
    def __init__(self, message: str = "There is nothing to compile"):
        super().__init__(message)


class NoBinaryError(ProjectShapeError):
    def __init__(self, message: str = "There is no src/main.rs to run"):
        super().__init__(message)


class AlreadyInitializedError(ProjectShapeError):
    def __init__(self, path: Path):
        super().__init__(f"{path} already contains a Freight.toml")
        self.path = path


class TestNameCollisionError(ProjectShapeError):
    __test__ = False

    def __init__(self, test_file: Path):
        super().__init__(
            f"Test file {test_file} would overwrite the {test_file.stem}.rs unit test harness"
        )
        self.test_file = test_file


class RootNotFoundError(FreightError):
    def __init__(self, start: Path):
        super().__init__(f"No root dir: no Freight.toml found in {start} or any parent directory")
        self.start = start


class ToolchainError(FreightError):
    """An external process could not be started or did not succeed."""


class ToolSpawnError(ToolchainError):
    """The external program could not be started at all."""

    def __init__(self, program: str, cause: Optional[BaseException] = None):
        message = f"Failed to start {program}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.program = program
        self.cause = cause


class ToolFailedError(ToolchainError):
    """The external program ran and exited unsuccessfully."""

    def __init__(self, program: str, subject: str, return_code: int):
        super().__init__(f"{program} failed for {subject} (exit status {return_code})")
        self.program = program
        self.subject = subject
        self.return_code = return_code


class BuildFailedError(ToolFailedError):
    pass


class TestFailedError(ToolFailedError):
    __test__ = False

