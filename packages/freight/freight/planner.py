"""
Compilation planning.

Turns a manifest plus the presence of src/lib.rs and src/main.rs into the
ordered list of compile steps for a build or a test build. Steps run strictly
in list order; a binary that links the library always comes after it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Tuple

from .config import ProjectManifest
from .errors import NothingToCompileError, TestNameCollisionError
from .layout import ProjectLayout
from .rustc import CompileRequest, CrateType

logger = logging.getLogger(__name__)

TEST_HARNESS_PREFIX = "test"


class UnitKind(Enum):
    LIBRARY = "lib"
    BINARY = "bin"
    LIBRARY_TEST = "lib-test"
    BINARY_TEST = "bin-test"
    FILE_TEST = "file-test"


@dataclass(frozen=True)
class CompilationUnit:
    """Something that gets compiled: a crate or one of its test harnesses."""
    kind: UnitKind
    source_path: Path
    artifact_name: str
    output_dir: Path
    depends_on: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CompileStep:
    unit: CompilationUnit
    request: CompileRequest


def harness_crate_name(crate_name: str, source_path: Path) -> str:
    """
    Crate name of the test harness built from `source_path`, e.g. test_demo_lib.

    Dashes in the file stem become underscores; rustc rejects them in crate names.
    """
    stem = Path(source_path).stem.replace("-", "_")
    return f"{TEST_HARNESS_PREFIX}_{crate_name}_{stem}"


class CompilationPlanner:
    """Derives compile steps for one project."""

    def __init__(self, manifest: ProjectManifest, layout: ProjectLayout):
        self.manifest = manifest
        self.layout = layout

    def plan_build(self) -> List[CompileStep]:
        """
        Steps for a normal build into target/debug.

        Raises:
            NothingToCompileError: Neither src/lib.rs nor src/main.rs exists.
        """
        has_lib, has_bin = self._sources()
        out_dir = self.layout.debug_dir
        steps = []

        if has_lib:
            steps.append(self._library_step(out_dir))
        if has_bin:
            externs = (self.manifest.crate_name,) if has_lib else ()
            steps.append(self._binary_step(out_dir, externs))

        logger.debug(f"Build plan: {[step.unit.artifact_name for step in steps]}")
        return steps

    def plan_test_build(self) -> List[CompileStep]:
        """
        Steps for a test build into target/debug/tests.

        Order: plain library (linked by everything after it), library unit
        test harness, binary unit test harness, then one harness per file in
        tests/, sorted by name.

        Raises:
            NothingToCompileError: Neither src/lib.rs nor src/main.rs exists.
            TestNameCollisionError: A file in tests/ would produce the same
                harness name as a unit test harness.
        """
        has_lib, has_bin = self._sources()
        out_dir = self.layout.test_out_dir
        lib_externs = (self.manifest.crate_name,) if has_lib else ()
        steps = []

        if has_lib:
            steps.append(self._library_step(out_dir))
            steps.append(self._test_step(UnitKind.LIBRARY_TEST, self.layout.lib_rs, ()))
        if has_bin:
            steps.append(self._test_step(UnitKind.BINARY_TEST, self.layout.main_rs, lib_externs))

        reserved = {self.layout.lib_rs.stem, self.layout.main_rs.stem}
        for test_file in self.layout.test_files():
            if test_file.stem in reserved:
                raise TestNameCollisionError(test_file)
            steps.append(self._test_step(UnitKind.FILE_TEST, test_file, lib_externs))

        logger.debug(f"Test build plan: {[step.unit.artifact_name for step in steps]}")
        return steps

    def _sources(self) -> Tuple[bool, bool]:
        has_lib = self.layout.has_lib()
        has_bin = self.layout.has_bin()
        if not has_lib and not has_bin:
            raise NothingToCompileError()
        return has_lib, has_bin

    def _base_request(self, out_dir: Path):
        return (
            CompileRequest.builder()
            .edition(self.manifest.edition)
            .output_dir(out_dir)
            .lib_dir(out_dir)
        )

    def _library_step(self, out_dir: Path) -> CompileStep:
        unit = CompilationUnit(
            kind=UnitKind.LIBRARY,
            source_path=self.layout.lib_rs,
            artifact_name=self.manifest.crate_name,
            output_dir=out_dir,
        )
        request = (
            self._base_request(out_dir)
            .crate_type(CrateType.LIB)
            .crate_name(self.manifest.crate_name)
            .source(unit.source_path)
            .done()
        )
        return CompileStep(unit, request)

    def _binary_step(self, out_dir: Path, externs: Tuple[str, ...]) -> CompileStep:
        unit = CompilationUnit(
            kind=UnitKind.BINARY,
            source_path=self.layout.main_rs,
            artifact_name=self.manifest.crate_name,
            output_dir=out_dir,
            depends_on=externs,
        )
        request = (
            self._base_request(out_dir)
            .crate_type(CrateType.BIN)
            .crate_name(self.manifest.crate_name)
            .source(unit.source_path)
            .externs(externs)
            .done()
        )
        return CompileStep(unit, request)

    def _test_step(
        self,
        kind: UnitKind,
        source_path: Path,
        externs: Tuple[str, ...],
    ) -> CompileStep:
        out_dir = self.layout.test_out_dir
        name = harness_crate_name(self.manifest.crate_name, source_path)
        unit = CompilationUnit(
            kind=kind,
            source_path=source_path,
            artifact_name=name,
            output_dir=out_dir,
            depends_on=externs,
        )
        request = (
            self._base_request(out_dir)
            .crate_type(CrateType.BIN)
            .crate_name(name)
            .source(source_path)
            .externs(externs)
            .test()
            .done()
        )
        return CompileStep(unit, request)
