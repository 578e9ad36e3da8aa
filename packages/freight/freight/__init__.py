"""
freight: a minimal build and test orchestrator for single-crate Rust projects.

This library drives rustc and rustdoc directly: it plans the compile steps for
a project's library and binary, builds their test harnesses, and runs the
resulting tests in a fixed order.
"""

from .config import MANIFEST_FILE, ProjectManifest, ToolchainConfig
from .errors import FreightError
from .layout import ProjectLayout, find_project_root
from .planner import CompilationPlanner, CompileStep
from .project import Project
from .runner import TestRunner
from .rustc import CompileRequest, CrateType, Edition, Rustc
from .rustdoc import RustDoc
from .scaffold import init

__version__ = "0.1.0"
__all__ = [
    "MANIFEST_FILE",
    "CompilationPlanner",
    "CompileRequest",
    "CompileStep",
    "CrateType",
    "Edition",
    "FreightError",
    "Project",
    "ProjectLayout",
    "ProjectManifest",
    "RustDoc",
    "Rustc",
    "TestRunner",
    "ToolchainConfig",
    "find_project_root",
    "init",
]
