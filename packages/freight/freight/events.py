"""Progress events emitted while building and testing."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class Phase(Enum):
    COMPILING_LIB = "compiling_lib"
    COMPILING_BIN = "compiling_bin"
    DONE = "done"
    UNIT_TEST_STARTED = "unit_test_started"
    DOC_TEST_STARTED = "doc_test_started"


@dataclass(frozen=True)
class PhaseEvent:
    phase: Phase
    name: Optional[str] = None


EventSink = Callable[[PhaseEvent], None]


def discard_events(event: PhaseEvent) -> None:
    pass
