"""Tests for compilation planning."""

import pytest

from freight.config import ProjectManifest
from freight.errors import NothingToCompileError, TestNameCollisionError
from freight.layout import ProjectLayout
from freight.planner import CompilationPlanner, UnitKind, harness_crate_name
from freight.rustc import CrateType, Edition

from conftest import write_project


def planner_for(root, name="demo", edition=Edition.E2021):
    return CompilationPlanner(ProjectManifest(name, edition), ProjectLayout(root))


class TestHarnessNames:
    """Test deriving test harness crate names."""

    def test_unit_test_names(self, project_dir):
        """Library and binary harnesses get distinct, predictable names."""
        layout = ProjectLayout(project_dir)

        assert harness_crate_name("demo", layout.lib_rs) == "test_demo_lib"
        assert harness_crate_name("demo", layout.main_rs) == "test_demo_main"

    def test_file_test_name(self, tmp_path):
        """File tests are named after their file stem."""
        assert harness_crate_name("demo", tmp_path / "tests" / "smoke.rs") == "test_demo_smoke"

    def test_dashes_become_underscores(self, tmp_path):
        """A dashed file stem still yields a valid crate name."""
        assert harness_crate_name("demo", tmp_path / "tests" / "it-works.rs") == "test_demo_it_works"


class TestPlanBuild:
    """Test the normal build plan."""

    def test_lib_and_bin(self, project_dir):
        """The library compiles first and the binary links it."""
        steps = planner_for(project_dir).plan_build()

        assert [step.unit.kind for step in steps] == [UnitKind.LIBRARY, UnitKind.BINARY]
        lib, bin_ = (step.request for step in steps)
        assert lib.crate_type is CrateType.LIB
        assert lib.extern_links == ()
        assert bin_.crate_type is CrateType.BIN
        assert bin_.extern_links == ("demo",)
        assert steps[1].unit.depends_on == ("demo",)

    def test_lib_only(self, tmp_path):
        """A library-only project compiles just the library."""
        root = write_project(tmp_path / "demo", bin=False)

        steps = planner_for(root).plan_build()

        assert [step.unit.kind for step in steps] == [UnitKind.LIBRARY]

    def test_bin_only(self, tmp_path):
        """A binary-only project compiles the binary with no externs."""
        root = write_project(tmp_path / "demo", lib=False)

        steps = planner_for(root).plan_build()

        assert [step.unit.kind for step in steps] == [UnitKind.BINARY]
        assert steps[0].request.extern_links == ()

    def test_nothing_to_compile(self, tmp_path):
        """With neither source, planning fails."""
        root = write_project(tmp_path / "demo", lib=False, bin=False)

        with pytest.raises(NothingToCompileError, match="There is nothing to compile"):
            planner_for(root).plan_build()

    def test_requests_target_debug(self, project_dir):
        """Every step writes to and searches target/debug with the manifest edition."""
        debug = project_dir / "target" / "debug"

        for step in planner_for(project_dir, edition=Edition.E2018).plan_build():
            assert step.request.output_dir == debug
            assert step.request.link_search_dir == debug
            assert step.request.edition is Edition.E2018
            assert step.request.crate_name == "demo"
            assert not step.request.is_test_harness

    def test_sources(self, project_dir):
        """Each step compiles its conventional entry point."""
        lib, bin_ = planner_for(project_dir).plan_build()

        assert lib.request.source_path == project_dir / "src" / "lib.rs"
        assert bin_.request.source_path == project_dir / "src" / "main.rs"


class TestPlanTestBuild:
    """Test the test build plan."""

    def test_lib_and_bin(self, project_dir):
        """Plain library, library harness, then binary harness linking the library."""
        steps = planner_for(project_dir).plan_test_build()

        assert [step.unit.kind for step in steps] == [
            UnitKind.LIBRARY,
            UnitKind.LIBRARY_TEST,
            UnitKind.BINARY_TEST,
        ]
        plain, lib_test, bin_test = (step.request for step in steps)
        assert plain.crate_name == "demo"
        assert not plain.is_test_harness
        assert lib_test.crate_name == "test_demo_lib"
        assert lib_test.is_test_harness
        assert lib_test.extern_links == ()
        assert bin_test.crate_name == "test_demo_main"
        assert bin_test.is_test_harness
        assert bin_test.extern_links == ("demo",)

    def test_outputs_go_to_tests_dir(self, project_dir):
        """Every test build step writes to and searches target/debug/tests."""
        tests_out = project_dir / "target" / "debug" / "tests"

        for step in planner_for(project_dir).plan_test_build():
            assert step.request.output_dir == tests_out
            assert step.request.link_search_dir == tests_out
            assert step.unit.output_dir == tests_out

    def test_bin_only(self, tmp_path):
        """A binary-only project builds one harness with no externs."""
        root = write_project(tmp_path / "demo", lib=False)

        steps = planner_for(root).plan_test_build()

        assert [step.request.crate_name for step in steps] == ["test_demo_main"]
        assert steps[0].request.extern_links == ()

    def test_file_tests_extern_library(self, tmp_path):
        """Files in tests/ become harnesses after the unit tests, linking the library."""
        root = write_project(tmp_path / "demo", test_files=("b_api.rs", "a_smoke.rs"))

        steps = planner_for(root).plan_test_build()

        file_steps = [step for step in steps if step.unit.kind is UnitKind.FILE_TEST]
        assert [step.request.crate_name for step in file_steps] == [
            "test_demo_a_smoke",
            "test_demo_b_api",
        ]
        assert steps[-2:] == file_steps
        for step in file_steps:
            assert step.request.extern_links == ("demo",)
            assert step.request.is_test_harness

    def test_file_tests_without_library(self, tmp_path):
        """Without a library, file tests link nothing."""
        root = write_project(tmp_path / "demo", lib=False, test_files=("smoke.rs",))

        steps = planner_for(root).plan_test_build()

        assert steps[-1].request.crate_name == "test_demo_smoke"
        assert steps[-1].request.extern_links == ()

    def test_file_test_collision(self, tmp_path):
        """tests/lib.rs would overwrite the library harness."""
        root = write_project(tmp_path / "demo", test_files=("lib.rs",))

        with pytest.raises(TestNameCollisionError):
            planner_for(root).plan_test_build()

    def test_nothing_to_compile(self, tmp_path):
        """Test files alone are not enough to build."""
        root = write_project(tmp_path / "demo", lib=False, bin=False, test_files=("smoke.rs",))

        with pytest.raises(NothingToCompileError):
            planner_for(root).plan_test_build()
