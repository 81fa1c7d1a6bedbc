"""
Image Naming Module

Helpers that derive image names, tags and output directories.
"""

import hashlib
import re
from pathlib import Path

from .. import constants
from ..datacls import Role
from ..exceptions import ConfigValidationError

_INVALID_TAG_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def sanitize_tag(version: str) -> str:
    """Replace every character Docker does not accept in a tag with '_'."""
    return _INVALID_TAG_CHARS.sub("_", version)


def role_image_name(repository: str, role_name: str, version: str) -> str:
    """
    Name of the final image of a role.

    Example: ('hcf', 'myrole', '1.0+dev.3') -> 'hcf-myrole:1.0_dev.3'
    """
    return f"{repository}-{role_name}:{sanitize_tag(version)}"


def base_image_name(repository: str, base_image_version: str) -> str:
    return f"{repository}-{constants.ROLE_BASE_SUFFIX}:{sanitize_tag(base_image_version)}"


def role_output_dir(target_path: Path, role_name: str) -> Path:
    """
    Build context directory of a role, ``<target_path>/<role_name>``.

    Raises:
        ConfigValidationError: If the directory would not lie inside target_path
    """
    target = Path(target_path)
    role_dir = target / role_name
    if target.resolve() not in role_dir.resolve().parents:
        raise ConfigValidationError(
            f"Output directory of role '{role_name}' escapes the target directory '{target}'."
        )
    return role_dir


def role_dev_version(role: Role) -> str:
    """
    Content version of a role for dev builds.

    Hashes job fingerprints followed by package fingerprints, both in
    declared order, so a role only gets a new version when its content does.
    """
    hasher = hashlib.sha1()
    for job in role.jobs:
        hasher.update(f"job:{job.name}:{job.fingerprint}".encode("utf-8"))
        hasher.update(b"\0")
    for job in role.jobs:
        for pkg in job.packages:
            hasher.update(f"pkg:{pkg.name}:{pkg.fingerprint}".encode("utf-8"))
            hasher.update(b"\0")
    return hasher.hexdigest()
