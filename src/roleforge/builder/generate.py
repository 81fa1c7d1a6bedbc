"""
Artifact Generator Module

Renders the text artifacts of a role image from the Jinja2 templates shipped
in ``roleforge.resources``:

- Dockerfile: base image, maintainer (release mode only), role/version label
- run.sh: entry script, either exec'ing the single job or starting monit
- <role>.sh: startup hook running the role's custom scripts
"""

import json
import logging
import shlex
from importlib import resources
from typing import Any, Dict, List

from jinja2 import Environment, StrictUndefined, TemplateError

from .. import constants
from ..config import BuilderConfig
from ..datacls import Role
from ..exceptions import GenerationError
from .naming import base_image_name

logger = logging.getLogger(__name__)

_jinja_env = Environment(
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def _load_template(name: str):
    try:
        text = resources.files('roleforge.resources').joinpath('templates').joinpath(name).read_text(encoding='utf-8')
    except FileNotFoundError:
        raise GenerationError(f"Template '{name}' not found in package resources.")
    return _jinja_env.from_string(text)


def _render(name: str, role: Role, context: Dict[str, Any]) -> str:
    try:
        return _load_template(name).render(role=role, **context)
    except TemplateError as e:
        raise GenerationError(f"[{role.name}] Failed to render '{name}': {e}") from e


def _check_role(role: Role):
    if not role.name or not role.name.strip():
        raise GenerationError("Role is missing its name.")
    if not role.jobs:
        raise GenerationError(f"[{role.name}] Role has no jobs.")


def _label_value(value: str) -> str:
    """Double-quoted LABEL value; JSON string escaping is what Docker expects there."""
    return json.dumps(value, ensure_ascii=False)


def templates_document(role: Role) -> str:
    """
    The job document handed to the template renderer of a composite role.

    Its ``templates`` array keeps the declared job order; consumers parse it.
    """
    doc = {
        "job": {
            "name": role.name,
            "templates": [{"name": job.name} for job in role.jobs],
        }
    }
    return json.dumps(doc, separators=(",", ":"))


def generate_dockerfile(role: Role, config: BuilderConfig) -> str:
    """
    Generate the Dockerfile of a role image.

    Args:
        role: The role to build
        config: Builder settings (repository, versions, dev flag)

    Returns:
        Dockerfile text

    Raises:
        GenerationError: If the role has no name
    """
    if not role.name or not role.name.strip():
        raise GenerationError("Cannot generate a Dockerfile for a role without a name.")

    dev = config.dev or role.is_dev
    content = _render(constants.DOCKERFILE_NAME, role, {
        "base_image": base_image_name(config.repository, config.base_image_version),
        "dev": dev,
        "maintainer": constants.IMAGE_MAINTAINER,
        "role_label": _label_value(role.name),
        "version_label": _label_value(config.version),
        "run_script": constants.RUN_SCRIPT_PATH,
    })
    logger.debug(f"[Generator] Dockerfile for role '{role.name}' generated (dev={dev}).")
    return content


def generate_run_script(role: Role, config: BuilderConfig) -> str:
    """
    Generate the run.sh entry script of a role image.

    Simple roles exec the job's ``bin/run`` directly; composite roles render
    every job and hand over to monit.

    Raises:
        GenerationError: If the role has no jobs or a job's templates directory is missing
    """
    _check_role(role)
    for job in role.jobs:
        if not job.templates_path.is_dir():
            raise GenerationError(
                f"[{role.name}] Templates directory of job '{job.name}' not found: {job.templates_path}"
            )

    content = _render(constants.RUN_SCRIPT_NAME, role, {
        "composite": role.is_composite,
        "startup_script": f"{constants.STARTUP_DIR}/{role.startup_script_name}",
        "jobs_src": constants.JOBS_SRC_DIR,
        "jobs_dir": constants.JOBS_DIR,
        "properties_template": constants.PROPERTIES_TEMPLATE,
        "configgin": constants.CONFIGGIN_PATH,
        "config_store_address": shlex.quote(config.config_store_address),
        "config_store_prefix": shlex.quote(config.config_store_prefix),
        "templates_json": shlex.quote(templates_document(role)),
        "monitrc_template": constants.MONITRC_TEMPLATE_PATH,
        "monitrc": constants.MONITRC_PATH,
    })
    logger.debug(f"[Generator] run.sh for role '{role.name}' generated (composite={role.is_composite}).")
    return content


def custom_script_names(role: Role) -> List[str]:
    return [script.name for script in role.scripts]


def generate_startup_script(role: Role, config: BuilderConfig) -> str:
    """Generate the startup hook that runs the role's custom scripts in order."""
    _check_role(role)
    scripts = [name for name in custom_script_names(role) if name != role.startup_script_name]
    return _render("startup.sh", role, {
        "scripts": scripts,
        "startup_dir": constants.STARTUP_DIR,
    })
