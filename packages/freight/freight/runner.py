"""
Test discovery and execution.

After a test build, target/debug/tests holds one executable per test harness
alongside the library artifact and other build byproducts. Executables are
told apart by having no file extension. They are run one at a time, in this
order:

1. the library unit tests (test_<crate>_lib)
2. the binary unit tests (test_<crate>_main)
3. every other harness, in directory enumeration order
4. the documentation examples of src/lib.rs, through rustdoc --test

The first harness that exits non-zero stops the sequence.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ProjectManifest
from .errors import TestFailedError
from .events import EventSink, Phase, PhaseEvent, discard_events
from .layout import ProjectLayout
from .planner import harness_crate_name
from .process import ProcessRunner, run_process
from .rustdoc import DocRequest, RustDoc

logger = logging.getLogger(__name__)


class TestKind(Enum):
    __test__ = False

    LIBRARY_UNIT = "lib"
    BINARY_UNIT = "bin"
    FILE = "file"


@dataclass(frozen=True)
class TestArtifact:
    """A runnable test harness found in the test output directory."""
    __test__ = False

    path: Path
    kind: TestKind
    label: str

    @property
    def name(self) -> str:
        return self.path.name


def is_test_artifact(path: Path) -> bool:
    """Extensionless regular files are executables; everything else is a byproduct."""
    # Only holds on platforms without an executable suffix.
    return path.is_file() and path.suffix == ""


def file_test_label(artifact_name: str) -> str:
    """Label shown for a file test: the part of the name after the last underscore."""
    return artifact_name.rsplit("_", 1)[-1]


class TestRunner:
    """Runs the test harnesses of one project in a fixed order."""

    __test__ = False

    def __init__(
        self,
        manifest: ProjectManifest,
        layout: ProjectLayout,
        rustdoc: Optional[RustDoc] = None,
        runner: ProcessRunner = run_process,
        events: EventSink = discard_events,
    ):
        self.manifest = manifest
        self.layout = layout
        self.rustdoc = rustdoc or RustDoc(runner=runner)
        self.runner = runner
        self.events = events

    def discover(self) -> List[TestArtifact]:
        """List test harnesses in the order they will run."""
        test_dir = self.layout.test_out_dir
        if not test_dir.is_dir():
            logger.debug(f"{test_dir} does not exist; no test harnesses to run")
            return []

        lib_name = harness_crate_name(self.manifest.crate_name, self.layout.lib_rs)
        bin_name = harness_crate_name(self.manifest.crate_name, self.layout.main_rs)

        lib_test = None
        bin_test = None
        file_tests = []

        for entry in test_dir.iterdir():
            if not is_test_artifact(entry):
                continue
            if entry.name == lib_name:
                lib_test = TestArtifact(entry, TestKind.LIBRARY_UNIT, self._relative(self.layout.lib_rs))
            elif entry.name == bin_name:
                bin_test = TestArtifact(entry, TestKind.BINARY_UNIT, self._relative(self.layout.main_rs))
            else:
                file_tests.append(TestArtifact(entry, TestKind.FILE, file_test_label(entry.name)))

        ordered = [artifact for artifact in (lib_test, bin_test) if artifact is not None]
        ordered.extend(file_tests)
        return ordered

    def run(self, args: Sequence[str] = ()) -> None:
        """
        Run every test harness, then the doc tests.

        `args` are appended verbatim to each harness command line.

        Raises:
            TestFailedError: A harness or the doc tests exited non-zero.
            ToolSpawnError: A harness or rustdoc could not be started.
        """
        artifacts = self.discover()
        logger.info(f"Running {len(artifacts)} test harness(es) for {self.manifest.crate_name}")

        for artifact in artifacts:
            self.run_artifact(artifact, args)

        if self.layout.has_lib():
            self.run_doc_tests()

    def run_artifact(self, artifact: TestArtifact, args: Sequence[str] = ()) -> None:
        self.events(PhaseEvent(Phase.UNIT_TEST_STARTED, artifact.label))
        return_code = self.runner([str(artifact.path), *args])
        if return_code != 0:
            raise TestFailedError(artifact.name, artifact.label, return_code)

    def run_doc_tests(self) -> None:
        self.events(PhaseEvent(Phase.DOC_TEST_STARTED, self.manifest.crate_name))
        request = DocRequest(
            crate_name=self.manifest.crate_name,
            edition=self.manifest.edition,
            lib_dir=self.layout.test_out_dir,
        )
        return_code = self.rustdoc.test(request, self.layout.lib_rs)
        if return_code != 0:
            raise TestFailedError(self.rustdoc.program, f"doc tests of {self.manifest.crate_name}", return_code)

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.layout.root).as_posix()
