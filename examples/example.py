#!/usr/bin/env python3
"""
Example usage of the freight library.

Creates a throwaway project, builds it, runs its tests and runs the binary.
Requires rustc, rustdoc and git on PATH.
"""

import sys
import tempfile
from pathlib import Path

from freight import Project, init
from freight.errors import FreightError
from freight.events import PhaseEvent


def print_event(event: PhaseEvent):
    """Print progress events as they arrive."""
    name = f" {event.name}" if event.name else ""
    print(f"  [{event.phase.value}]{name}")


def main():
    print("=== Freight Example ===\n")

    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir) / "hello_freight"

        # Example 1: Scaffold a library project, then add a binary that uses it
        print("1. Creating a project:")
        manifest = init(root, lib=True)
        (root / "src" / "main.rs").write_text(
            "fn main() {\n    println!(\"2 + 2 = {}\", hello_freight::add(2, 2));\n}\n"
        )
        print(f"   Created {manifest.crate_name} (edition {manifest.edition})")

        project = Project.discover(root / "src", events=print_event)

        # Example 2: Inspect the compile plan without running anything
        print("\n2. Build plan:")
        for step in project.planner.plan_build():
            request = step.request
            externs = ", ".join(request.extern_links) or "-"
            print(f"   {step.unit.kind.value:<4} {request.source_path.name:<8} externs: {externs}")

        print("\n3. Test build plan:")
        for step in project.planner.plan_test_build():
            print(f"   {step.unit.kind.value:<9} -> {step.request.crate_name}")

        try:
            # Example 3: Build, test and run
            print("\n4. Building:")
            project.build()

            print("\n5. Testing:")
            project.test()

            print("\n6. Running:")
            status = project.run()
            print(f"   Binary exited with status {status}")
        except FreightError as e:
            print(f"❌ {e}")
            return 1

    print("\n✅ Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
