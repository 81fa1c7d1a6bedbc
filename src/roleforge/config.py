import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Iterable
from pydantic import BaseModel, Field, ValidationError, model_validator, ConfigDict

from . import constants
from .datacls import Release, Role
from .exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
)


logger = logging.getLogger(__name__)


class BuilderConfig(BaseModel):
    """
        Immutable settings shared by every role build of one run
    """
    model_config = ConfigDict(frozen=True)

    repository: str
    compiled_packages_path: Path
    target_path: Path
    config_store_address: str = constants.DEFAULT_CONFIG_STORE_ADDRESS
    config_store_prefix: str = constants.DEFAULT_CONFIG_STORE_PREFIX
    version: str
    base_image_version: str
    dev: bool = False

    @model_validator(mode='after')
    def check_required_strings(self) -> 'BuilderConfig':
        """Repository and both versions end up in image names, so they cannot be blank"""
        for field_name in ('repository', 'version', 'base_image_version'):
            if not getattr(self, field_name).strip():
                raise ConfigValidationError(f"Builder setting '{field_name}' cannot be empty.")
        return self


class ReleaseModel(BaseModel):
    """
        Class Config-Validation Model describe `releases`
    """
    name: str
    version: str = ""
    path: Optional[str] = None
    dev: bool = False


class JobModel(BaseModel):
    """
        Class Config-Validation Model describe a job inside a role
    """
    name: str
    release: str
    path: Optional[str] = None
    packages: List[Any] = Field(default_factory=list)
    fingerprint: str = ""


class RoleModel(BaseModel):
    """
        Class Config-Validation Model describe `roles`
    """
    name: str
    jobs: List[JobModel]
    run: Dict[str, Any] = Field(default_factory=dict)
    scripts: List[str] = Field(default_factory=list)
    supervised: Optional[bool] = None

    @model_validator(mode='after')
    def check_jobs_present(self) -> 'RoleModel':
        if not self.jobs:
            raise ConfigValidationError(f"Role '{self.name}' must have at least one job.")
        return self


class ManifestModel(BaseModel):
    """
        Class Config-Validation Model desribe top-level of the role manifest
    """
    releases: List[ReleaseModel] = Field(default_factory=list)
    roles: List[RoleModel]

    @model_validator(mode='after')
    def validate_references(self) -> 'ManifestModel':
        """Role names must be unique and every job must point at a declared release"""
        release_names = {r.name for r in self.releases}
        seen = set()
        for role in self.roles:
            if role.name in seen:
                raise ConfigValidationError(f"Role '{role.name}' is declared more than once.")
            seen.add(role.name)
            for job in role.jobs:
                if job.release not in release_names:
                    raise ConfigValidationError(
                        f"Job '{job.name}' of role '{role.name}' refers to an undefined release: '{job.release}'."
                    )
        return self


class RoleManifest:
    """
    Loads an already-resolved role list from YAML and turns it into Role objects.
    Relative paths are resolved against the manifest's directory.
    """
    def __init__(self, manifest_path: str):
        self.path = Path(manifest_path)
        self.base_dir = self.path.resolve().parent
        logger.info(f"Loading role manifest from '{self.path}'...")
        raw_data = self._load_raw_manifest()

        logger.info("Validating role manifest structure with Pydantic...")
        try:
            self.model = ManifestModel.model_validate(raw_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Role manifest validation failed:\n{e}")
        self.roles: List[Role] = self._build_roles()
        logger.info(f"Role manifest loaded with {len(self.roles)} role(s).")

    def _load_raw_manifest(self) -> Dict[str, Any]:
        try:
            content = self.path.read_text(encoding='utf-8')
            data = yaml.safe_load(content)
            if not isinstance(data, dict):
                raise ConfigParsingError("Role manifest must be a YAML document containing a dictionary.")
            logger.debug(f"Successfully parsed YAML from '{self.path}'.")
            return data
        except FileNotFoundError:
            raise ConfigFileMissingError(f"Role manifest not found at: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.base_dir / p

    def _build_roles(self) -> List[Role]:
        releases = {}
        for rel in self.model.releases:
            releases[rel.name] = Release(
                name=rel.name,
                version=rel.version,
                path=self._resolve(rel.path) if rel.path else None,
                dev=rel.dev,
            )

        roles = []
        for role_conf in self.model.roles:
            jobs = []
            for job_conf in role_conf.jobs:
                release = releases[job_conf.release]
                if job_conf.path:
                    job_path = self._resolve(job_conf.path)
                elif release.path is not None:
                    job_path = release.path / "jobs" / job_conf.name
                else:
                    raise ConfigValidationError(
                        f"Job '{job_conf.name}' of role '{role_conf.name}' has no path "
                        f"and release '{release.name}' has none to derive it from."
                    )
                packages = [{"name": p} if isinstance(p, str) else p for p in job_conf.packages]
                jobs.append({
                    "name": job_conf.name,
                    "path": job_path,
                    "release": release,
                    "packages": packages,
                    "fingerprint": job_conf.fingerprint,
                })
            try:
                role = Role.model_validate({
                    "name": role_conf.name,
                    "jobs": jobs,
                    "run": role_conf.run,
                    "scripts": [self._resolve(s) for s in role_conf.scripts],
                    "supervised": role_conf.supervised,
                })
            except ValidationError as e:
                raise ConfigValidationError(f"Role '{role_conf.name}' is invalid:\n{e}")
            logger.debug(f"Role '{role.name}' loaded with jobs {[j.name for j in role.jobs]}.")
            roles.append(role)
        return roles

    def lookup_role(self, name: str) -> Optional[Role]:
        for role in self.roles:
            if role.name == name:
                return role
        return None

    def select_roles(self, names: Optional[Iterable[str]] = None) -> List[Role]:
        """Returns the named roles in manifest order, or every role when no names are given."""
        if not names:
            return list(self.roles)
        wanted = set(names)
        unknown = sorted(wanted - {role.name for role in self.roles})
        if unknown:
            raise ConfigValidationError(f"Unknown role(s) requested: {', '.join(unknown)}")
        return [role for role in self.roles if role.name in wanted]
