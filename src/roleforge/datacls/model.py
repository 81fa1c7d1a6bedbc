"""
Role Data Model

Pydantic models describing releases, packages, jobs and roles as supplied by
the (external) role manifest. They are frozen: a role never changes while its
image is being built.
"""

import re
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .. import constants
from ..exceptions import ConfigValidationError

_ROLE_NAME_RE = re.compile(constants.ROLE_NAME_PATTERN)


def _is_license_file(path: Path) -> bool:
    return path.is_file() and path.name.lower().startswith(constants.LICENSE_PREFIXES)


class Release(BaseModel):
    """
    Class Model describe the release a job was taken from
    """
    model_config = ConfigDict(frozen=True)

    name: str
    version: str = ""
    path: Optional[Path] = None
    dev: bool = False

    def license_files(self) -> List[Path]:
        """License files found at the top level of the release directory, sorted by name."""
        if self.path is None or not self.path.is_dir():
            return []
        return sorted(p for p in self.path.iterdir() if _is_license_file(p))


class Package(BaseModel):
    """
    Class Model describe a compiled package
    """
    model_config = ConfigDict(frozen=True)

    name: str
    fingerprint: str = ""

    def compiled_dir(self, compiled_packages_path: Path) -> Path:
        return Path(compiled_packages_path) / self.name

    def license_files(self, compiled_packages_path: Path) -> List[Path]:
        """License files anywhere below the compiled package directory, relative to it."""
        root = self.compiled_dir(compiled_packages_path)
        if not root.is_dir():
            return []
        return sorted(p.relative_to(root) for p in root.rglob("*") if _is_license_file(p))


class Job(BaseModel):
    """
    Class Model describe a job: templates, monit file and the packages it needs
    """
    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    release: Release
    packages: List[Package] = Field(default_factory=list)
    fingerprint: str = ""

    @property
    def templates_path(self) -> Path:
        return self.path / constants.JOB_TEMPLATES_DIR

    @property
    def monit_path(self) -> Path:
        return self.path / constants.JOB_MONIT_NAME


class RoleRun(BaseModel):
    """
    Run configuration of a role. Only carried through; the image build does not interpret it.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    flight_stage: str = "flight"
    exposed_ports: List[dict] = Field(default_factory=list)
    volumes: List[dict] = Field(default_factory=list)
    scaling: dict = Field(default_factory=dict)


class Role(BaseModel):
    """
    Class Model describe a role, the unit that becomes one container image

    A role with more than one job is always *composite*: its jobs run under
    process supervision. The ``supervised`` flag can only turn supervision
    on for a single-job role; ``supervised: false`` on several jobs is
    rejected because all but the first job would never run.

    The name ends up in image names and in the role's output directory, so it
    must match ``ROLE_NAME_PATTERN`` (no path separators, no leading dot).
    """
    model_config = ConfigDict(frozen=True)

    name: str
    jobs: List[Job] = Field(default_factory=list)
    run: RoleRun = Field(default_factory=RoleRun)
    scripts: List[Path] = Field(default_factory=list)
    supervised: Optional[bool] = None

    @model_validator(mode='after')
    def check_role(self) -> 'Role':
        if not _ROLE_NAME_RE.fullmatch(self.name):
            raise ConfigValidationError(
                f"Invalid role name '{self.name}': must match '{constants.ROLE_NAME_PATTERN}'."
            )
        if self.supervised is False and len(self.jobs) > 1:
            raise ConfigValidationError(
                f"Role '{self.name}' has {len(self.jobs)} jobs and cannot be unsupervised."
            )
        return self

    @property
    def is_composite(self) -> bool:
        return len(self.jobs) > 1 or bool(self.supervised)

    @property
    def is_dev(self) -> bool:
        return any(job.release.dev for job in self.jobs)

    @property
    def startup_script_name(self) -> str:
        return f"{self.name}.sh"

    def releases(self) -> List[Release]:
        """Distinct releases of this role's jobs, in job order."""
        seen = {}
        for job in self.jobs:
            seen.setdefault(job.release.name, job.release)
        return list(seen.values())
