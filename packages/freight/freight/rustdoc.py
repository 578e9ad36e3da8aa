"""Documentation generator invocation."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .process import ProcessRunner, run_process
from .rustc import Edition, PathLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocRequest:
    """Arguments shared by rustdoc's generation and test modes."""
    crate_name: str
    edition: Edition
    lib_dir: Path
    out_dir: Optional[Path] = None


class RustDoc:
    """Interface for running rustdoc against a library's source."""

    def __init__(self, program: str = "rustdoc", runner: ProcessRunner = run_process):
        self.program = program
        self.runner = runner

    def doc(self, request: DocRequest, source_path: PathLike) -> int:
        """Generate HTML documentation into request.out_dir and return the exit status."""
        cmd = self._doc_command(request, source_path)
        logger.info(f"Documenting {request.crate_name} into {request.out_dir}")
        return self.runner(cmd)

    def test(self, request: DocRequest, source_path: PathLike) -> int:
        """Compile and run the documentation examples and return the exit status."""
        cmd = self._test_command(request, source_path)
        logger.info(f"Running doc tests for {request.crate_name}")
        return self.runner(cmd)

    def _doc_command(self, request: DocRequest, source_path: PathLike) -> List[str]:
        if request.out_dir is None:
            raise ValueError("The output path should be specified for documentation generation")
        return [
            self.program,
            str(source_path),
            "--crate-name", request.crate_name,
            "--edition", str(request.edition),
            "-L", str(request.lib_dir),
            "--out-dir", str(request.out_dir),
        ]

    def _test_command(self, request: DocRequest, source_path: PathLike) -> List[str]:
        return [
            self.program,
            "--test",
            str(source_path),
            "--crate-name", request.crate_name,
            "--edition", str(request.edition),
            "-L", str(request.lib_dir),
        ]
