"""Project scaffolding for `freight init`."""

import logging
from pathlib import Path
from typing import Callable

from .config import MANIFEST_FILE, ProjectManifest
from .errors import AlreadyInitializedError, ToolSpawnError, ToolchainError
from .rustc import Edition

logger = logging.getLogger(__name__)

GITIGNORE = "/target"

MAIN_TEMPLATE = """\
fn main() {
    println!("Hello, World!");
}
"""

LIB_TEMPLATE = """\
pub fn add(left: usize, right: usize) -> usize {
    left + right
}

#[cfg(test)]
mod tests {
    use super::*;

    #[test]
    fn it_works() {
        let result = add(2, 2);
        assert_eq!(result, 4);
    }
}
"""

RepositoryInitializer = Callable[[Path], None]


def init_git_repository(path: Path) -> None:
    """Run `git init` in `path`."""
    try:
        import git
    except ImportError as e:
        # GitPython refuses to import when no git executable is found.
        raise ToolSpawnError("git", e) from e

    try:
        git.Repo.init(path)
    except git.exc.GitCommandNotFound as e:
        raise ToolSpawnError("git", e) from e
    except git.exc.GitCommandError as e:
        raise ToolchainError(f"git init failed in {path}: {e}") from e


def init(
    path: Path,
    lib: bool = False,
    init_repository: RepositoryInitializer = init_git_repository,
) -> ProjectManifest:
    """
    Create a new project in `path`, creating the directory if needed.

    The crate is named after the directory, with dashes turned into underscores,
    and uses the 2021 edition. A binary crate (src/main.rs) is created unless
    `lib` is set, in which case a library crate (src/lib.rs) is created instead.

    Raises:
        AlreadyInitializedError: `path` already has a Freight.toml.
        ToolSpawnError: git could not be started.
    """
    path = Path(path).absolute()
    manifest_path = path / MANIFEST_FILE
    if manifest_path.exists():
        raise AlreadyInitializedError(path)

    path.mkdir(parents=True, exist_ok=True)
    logger.info(f"Initializing project in {path}")

    init_repository(path)
    (path / ".gitignore").write_text(GITIGNORE, encoding="utf-8")

    manifest = ProjectManifest(crate_name=path.name.replace("-", "_"), edition=Edition.E2021)
    manifest_path.write_text(manifest.to_text(), encoding="utf-8")

    src = path / "src"
    src.mkdir(exist_ok=True)
    if lib:
        (src / "lib.rs").write_text(LIB_TEMPLATE, encoding="utf-8")
    else:
        (src / "main.rs").write_text(MAIN_TEMPLATE, encoding="utf-8")

    return manifest
