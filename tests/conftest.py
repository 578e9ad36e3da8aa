"""Shared fixtures for the freight test suite."""

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from freight.config import MANIFEST_FILE
from freight.errors import ToolSpawnError
from freight.events import PhaseEvent


class FakeRunner:
    """Records every command instead of spawning it.

    Exit statuses can be scripted per program (first element of the argument
    vector, or its file name for test harnesses).
    """

    def __init__(self, exit_codes: Optional[Dict[str, int]] = None, missing: tuple = ()):
        self.commands: List[List[str]] = []
        self.exit_codes = exit_codes or {}
        self.missing = set(missing)

    def __call__(self, cmd) -> int:
        cmd = [str(part) for part in cmd]
        program = cmd[0]
        if program in self.missing:
            raise ToolSpawnError(program, FileNotFoundError(program))
        self.commands.append(cmd)
        return self.exit_codes.get(program, self.exit_codes.get(Path(program).name, 0))

    @property
    def programs(self) -> List[str]:
        return [cmd[0] for cmd in self.commands]

    def crate_names(self) -> List[str]:
        """--crate-name values of the rustc commands, in order."""
        names = []
        for cmd in self.commands:
            if "--crate-name" in cmd and "--out-dir" in cmd and "--crate-type" in cmd:
                names.append(cmd[cmd.index("--crate-name") + 1])
        return names


class EventRecorder:
    """Sink that keeps every event it receives, in order."""

    def __init__(self):
        self.events: List[PhaseEvent] = []

    def __call__(self, event: PhaseEvent) -> None:
        self.events.append(event)

    @property
    def phases(self):
        return [event.phase for event in self.events]


def write_project(
    root: Path,
    name: str = "demo",
    edition: str = "2021",
    lib: bool = True,
    bin: bool = True,
    test_files: tuple = (),
) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / MANIFEST_FILE).write_text(f'name = "{name}"\nedition = "{edition}"\n')
    src = root / "src"
    src.mkdir(exist_ok=True)
    if lib:
        (src / "lib.rs").write_text("pub fn answer() -> u32 { 42 }\n")
    if bin:
        (src / "main.rs").write_text("fn main() {}\n")
    if test_files:
        tests = root / "tests"
        tests.mkdir(exist_ok=True)
        for file_name in test_files:
            (tests / file_name).write_text("#[test]\nfn works() {}\n")
    return root


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def project_dir(tmp_path):
    """A project named demo with both src/lib.rs and src/main.rs."""
    return write_project(tmp_path / "demo")
