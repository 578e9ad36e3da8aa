"""Conventional file locations inside a freight project."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .config import MANIFEST_FILE
from .errors import RootNotFoundError

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".rs"


def find_project_root(start: Path) -> Path:
    """
    Walk up from `start` (inclusive) to the first directory holding a Freight.toml.

    Raises:
        RootNotFoundError: No ancestor, up to the filesystem root, has one.
    """
    start = Path(start).resolve()
    for candidate in (start, *start.parents):
        if (candidate / MANIFEST_FILE).is_file():
            logger.debug(f"Project root resolved to {candidate}")
            return candidate
    raise RootNotFoundError(start)


@dataclass(frozen=True)
class ProjectLayout:
    root: Path

    @classmethod
    def discover(cls, start: Path) -> "ProjectLayout":
        return cls(find_project_root(start))

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILE

    @property
    def src_dir(self) -> Path:
        return self.root / "src"

    @property
    def lib_rs(self) -> Path:
        return self.src_dir / "lib.rs"

    @property
    def main_rs(self) -> Path:
        return self.src_dir / "main.rs"

    @property
    def tests_dir(self) -> Path:
        return self.root / "tests"

    @property
    def target_dir(self) -> Path:
        return self.root / "target"

    @property
    def debug_dir(self) -> Path:
        return self.target_dir / "debug"

    @property
    def test_out_dir(self) -> Path:
        return self.debug_dir / "tests"

    @property
    def doc_dir(self) -> Path:
        return self.target_dir / "doc"

    def has_lib(self) -> bool:
        return self.lib_rs.is_file()

    def has_bin(self) -> bool:
        return self.main_rs.is_file()

    def test_files(self) -> List[Path]:
        """Immediate .rs files of the tests directory, sorted by name."""
        if not self.tests_dir.is_dir():
            return []
        return sorted(
            path
            for path in self.tests_dir.iterdir()
            if path.is_file() and path.suffix == SOURCE_EXTENSION
        )
