"""Top-level operations on a freight project: build, test, run, doc."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ProjectManifest, ToolchainConfig
from .errors import BuildFailedError, NoBinaryError, NothingToCompileError
from .events import EventSink, Phase, PhaseEvent, discard_events
from .layout import ProjectLayout
from .planner import CompilationPlanner, CompileStep, UnitKind
from .process import ProcessRunner, run_process
from .runner import TestRunner
from .rustc import Rustc
from .rustdoc import DocRequest, RustDoc

logger = logging.getLogger(__name__)


class Project:
    """A freight project rooted at a directory containing Freight.toml."""

    def __init__(
        self,
        layout: ProjectLayout,
        manifest: Optional[ProjectManifest] = None,
        toolchain: Optional[ToolchainConfig] = None,
        runner: ProcessRunner = run_process,
        events: EventSink = discard_events,
    ):
        """
        Args:
            layout: Where the project's sources and outputs live.
            manifest: Parsed manifest. Read from layout.manifest_path if omitted.
            toolchain: Compiler and doc tool names. Resolved from the
                environment if omitted.
            runner: Executes an argument vector and returns its exit status.
            events: Receives progress events.
        """
        self.layout = layout
        self.manifest = manifest or ProjectManifest.parse_from_file(layout.manifest_path)
        self.toolchain = toolchain or ToolchainConfig.from_env()
        self.runner = runner
        self.events = events
        self.rustc = Rustc(program=self.toolchain.rustc, runner=runner)
        self.rustdoc = RustDoc(program=self.toolchain.rustdoc, runner=runner)
        self.planner = CompilationPlanner(self.manifest, layout)

    @classmethod
    def discover(cls, start: Path, **kwargs) -> "Project":
        """Load the project whose root is `start` or its nearest ancestor with a Freight.toml."""
        return cls(ProjectLayout.discover(start), **kwargs)

    def build(self) -> None:
        """Compile the library and/or binary into target/debug."""
        steps = self.planner.plan_build()
        self._compile(steps, self.layout.debug_dir)
        self.events(PhaseEvent(Phase.DONE))

    def build_tests(self) -> None:
        """Compile every test harness into target/debug/tests."""
        steps = self.planner.plan_test_build()
        self._compile(steps, self.layout.test_out_dir)
        self.events(PhaseEvent(Phase.DONE))

    def test_runner(self) -> TestRunner:
        return TestRunner(
            self.manifest,
            self.layout,
            rustdoc=self.rustdoc,
            runner=self.runner,
            events=self.events,
        )

    def run_tests(self, args: Sequence[str] = ()) -> None:
        """Run the harnesses of a previous test build, then the doc tests."""
        self.test_runner().run(args)

    def test(self, args: Sequence[str] = ()) -> None:
        self.build_tests()
        self.run_tests(args)

    def run(self, args: Sequence[str] = ()) -> int:
        """
        Build, then run the binary with `args`.

        Returns:
            The binary's exit status.

        Raises:
            NoBinaryError: The project has no src/main.rs.
        """
        if not self.layout.has_bin():
            raise NoBinaryError()
        self.build()
        binary = self.layout.debug_dir / self.manifest.crate_name
        logger.info(f"Running {binary}")
        return self.runner([str(binary), *args])

    def doc(self) -> None:
        """
        Build, then generate the library's documentation into target/doc.

        Raises:
            NothingToCompileError: The project has no src/lib.rs.
            BuildFailedError: rustdoc exited non-zero.
        """
        if not self.layout.has_lib():
            raise NothingToCompileError("There is no src/lib.rs to document")
        self.build()
        self.layout.doc_dir.mkdir(parents=True, exist_ok=True)
        request = DocRequest(
            crate_name=self.manifest.crate_name,
            edition=self.manifest.edition,
            lib_dir=self.layout.debug_dir,
            out_dir=self.layout.doc_dir,
        )
        return_code = self.rustdoc.doc(request, self.layout.lib_rs)
        if return_code != 0:
            raise BuildFailedError(self.rustdoc.program, str(self.layout.lib_rs), return_code)

    def _compile(self, steps: List[CompileStep], out_dir: Path) -> None:
        out_dir.mkdir(parents=True, exist_ok=True)
        for step in steps:
            self._announce(step)
            return_code = self.rustc.run(step.request)
            if return_code != 0:
                raise BuildFailedError(self.rustc.program, str(step.unit.source_path), return_code)

    def _announce(self, step: CompileStep) -> None:
        kind = step.unit.kind
        if kind is UnitKind.LIBRARY:
            self.events(PhaseEvent(Phase.COMPILING_LIB, self.manifest.crate_name))
        elif kind is UnitKind.BINARY:
            self.events(PhaseEvent(Phase.COMPILING_BIN, self.manifest.crate_name))
        else:
            logger.debug(f"Compiling test harness {step.unit.artifact_name}")
