"""Compiler invocation: compile requests and the rustc command line."""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .errors import UnsupportedValueError
from .process import ProcessRunner, run_process

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Edition(Enum):
    E2015 = "2015"
    E2018 = "2018"
    E2021 = "2021"

    @classmethod
    def parse(cls, value: str) -> "Edition":
        for edition in cls:
            if edition.value == value:
                return edition
        raise UnsupportedValueError(f"Edition {value} is not supported")

    def __str__(self) -> str:
        return self.value


class CrateType(Enum):
    BIN = "bin"
    LIB = "lib"
    RLIB = "rlib"
    DYLIB = "dylib"
    CDYLIB = "cdylib"
    STATICLIB = "staticlib"
    PROC_MACRO = "proc-macro"

    @classmethod
    def parse(cls, value: str) -> "CrateType":
        for crate_type in cls:
            if crate_type.value == value:
                return crate_type
        raise UnsupportedValueError(f"Crate Type {value} is not supported")

    def __str__(self) -> str:
        return self.value


def _ordered_unique(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class CompileRequest:
    """A single, fully specified rustc invocation."""
    crate_type: CrateType
    crate_name: str
    output_dir: Path
    link_search_dir: Path
    edition: Edition = Edition.E2015
    source_path: Optional[Path] = None
    extern_links: Tuple[str, ...] = ()
    cfg_flags: Tuple[str, ...] = ()
    is_test_harness: bool = False

    @staticmethod
    def builder() -> "CompileRequestBuilder":
        return CompileRequestBuilder()


@dataclass(frozen=True)
class CompileRequestBuilder:
    """
    Immutable builder for CompileRequest.

    Every setter returns a new builder, so a partially configured builder can
    be shared and specialised without affecting other users:

        base = CompileRequest.builder().edition(Edition.E2021).crate_name("demo")
        lib = base.crate_type(CrateType.LIB).output_dir(out).lib_dir(out).done()
    """
    _edition: Optional[Edition] = None
    _crate_type: Optional[CrateType] = None
    _crate_name: Optional[str] = None
    _source_path: Optional[Path] = None
    _output_dir: Optional[Path] = None
    _link_search_dir: Optional[Path] = None
    _extern_links: Tuple[str, ...] = field(default=())
    _cfg_flags: Tuple[str, ...] = field(default=())
    _is_test_harness: bool = False

    def edition(self, edition: Edition) -> "CompileRequestBuilder":
        return replace(self, _edition=edition)

    def crate_type(self, crate_type: CrateType) -> "CompileRequestBuilder":
        return replace(self, _crate_type=crate_type)

    def crate_name(self, crate_name: str) -> "CompileRequestBuilder":
        return replace(self, _crate_name=crate_name)

    def source(self, source_path: PathLike) -> "CompileRequestBuilder":
        return replace(self, _source_path=Path(source_path))

    def output_dir(self, output_dir: PathLike) -> "CompileRequestBuilder":
        return replace(self, _output_dir=Path(output_dir))

    def lib_dir(self, link_search_dir: PathLike) -> "CompileRequestBuilder":
        return replace(self, _link_search_dir=Path(link_search_dir))

    def extern(self, crate_name: str) -> "CompileRequestBuilder":
        return replace(self, _extern_links=_ordered_unique(self._extern_links + (crate_name,)))

    def externs(self, crate_names: Iterable[str]) -> "CompileRequestBuilder":
        return replace(self, _extern_links=_ordered_unique(self._extern_links + tuple(crate_names)))

    def cfg(self, flag: str) -> "CompileRequestBuilder":
        return replace(self, _cfg_flags=_ordered_unique(self._cfg_flags + (flag,)))

    def test(self, is_test_harness: bool = True) -> "CompileRequestBuilder":
        return replace(self, _is_test_harness=is_test_harness)

    def done(self) -> CompileRequest:
        """
        Finalize the request.

        Raises:
            ValueError: A required field (crate type, crate name, output
                directory or library search directory) was never set.
        """
        missing = [
            name
            for name, value in (
                ("crate_type", self._crate_type),
                ("crate_name", self._crate_name),
                ("output_dir", self._output_dir),
                ("link_search_dir", self._link_search_dir),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"Compile request is missing required fields: {', '.join(missing)}")
        if not self._crate_name:
            raise ValueError("Compile request crate_name must not be empty")

        return CompileRequest(
            crate_type=self._crate_type,
            crate_name=self._crate_name,
            output_dir=self._output_dir,
            link_search_dir=self._link_search_dir,
            edition=self._edition or Edition.E2015,
            source_path=self._source_path,
            extern_links=self._extern_links,
            cfg_flags=self._cfg_flags,
            is_test_harness=self._is_test_harness,
        )


class Rustc:
    """Interface for invoking the rust compiler on a single crate."""

    def __init__(self, program: str = "rustc", runner: ProcessRunner = run_process):
        """
        Args:
            program: Name or path of the compiler executable.
            runner: Executes an argument vector and returns its exit status.
        """
        self.program = program
        self.runner = runner

    def run(self, request: CompileRequest, source_path: Optional[PathLike] = None) -> int:
        """
        Compile one crate and return rustc's exit status.

        A failing exit status is returned as-is; ToolSpawnError is raised if
        rustc could not be started.
        """
        cmd = self._build_command(request, source_path)
        logger.info(f"Compiling {request.crate_name} ({request.crate_type}) from {cmd[1]}")
        return self.runner(cmd)

    def _build_command(
        self,
        request: CompileRequest,
        source_path: Optional[PathLike] = None,
    ) -> List[str]:
        """Build the rustc argument vector for a request."""
        source = source_path if source_path is not None else request.source_path
        if source is None:
            raise ValueError(f"No source file given for crate {request.crate_name}")

        cmd = [
            self.program,
            str(source),
            "--edition", str(request.edition),
            "--crate-type", str(request.crate_type),
            "--crate-name", request.crate_name,
            "--out-dir", str(request.output_dir),
            "-L", str(request.link_search_dir),
        ]

        if request.is_test_harness:
            cmd.append("--test")

        for crate_name in request.extern_links:
            cmd.extend(["--extern", crate_name])

        for flag in request.cfg_flags:
            cmd.extend(["--cfg", flag])

        return cmd
