"""Project manifest and toolchain configuration."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ManifestError, UnsupportedValueError
from .rustc import Edition

logger = logging.getLogger(__name__)

MANIFEST_FILE = "Freight.toml"


@dataclass(frozen=True)
class ProjectManifest:
    """Contents of a Freight.toml file."""
    crate_name: str
    edition: Edition

    @classmethod
    def parse(cls, text: str) -> "ProjectManifest":
        """
        Parse manifest text made of `key = "value"` lines.

        Recognized keys are `name` and `edition`; both are required.

        Raises:
            ManifestError: On an unknown key, a line without `=`, an
                unsupported edition, or a missing required key.
        """
        crate_name = None
        edition = None

        for line in text.splitlines():
            if not line.strip():
                continue
            if "=" not in line:
                raise ManifestError(f"Line '{line.strip()}' is not a key = value pair")

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().replace('"', "")

            if key == "name":
                crate_name = value
            elif key == "edition":
                try:
                    edition = Edition.parse(value)
                except UnsupportedValueError as e:
                    raise ManifestError(str(e)) from e
            else:
                raise ManifestError(f"Field {key} is unsupported")

        if not crate_name:
            raise ManifestError("name is a required field")
        if edition is None:
            raise ManifestError("edition is a required field")

        return cls(crate_name=crate_name, edition=edition)

    @classmethod
    def parse_from_file(cls, path: Path) -> "ProjectManifest":
        logger.debug(f"Reading manifest {path}")
        return cls.parse(Path(path).read_text(encoding="utf-8"))

    def to_text(self) -> str:
        return f'name = "{self.crate_name}"\nedition = "{self.edition}"\n'


@dataclass(frozen=True)
class ToolchainConfig:
    """Names of the external programs freight drives."""
    rustc: str = "rustc"
    rustdoc: str = "rustdoc"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ToolchainConfig":
        """
        Resolve tool names from the environment.

        FREIGHT_RUSTC / FREIGHT_RUSTDOC take precedence over the RUSTC /
        RUSTDOC variables cargo also honours.
        """
        env = os.environ if environ is None else environ
        return cls(
            rustc=env.get("FREIGHT_RUSTC") or env.get("RUSTC") or cls.rustc,
            rustdoc=env.get("FREIGHT_RUSTDOC") or env.get("RUSTDOC") or cls.rustdoc,
        )
