"""
Build Context Assembler Module

Produces the on-disk Docker build context of one role:

    <target>/<role>/Dockerfile
    <target>/<role>/root/opt/hcf/run.sh
    <target>/<role>/root/opt/hcf/startup/<role>.sh (+ custom scripts)
    <target>/<role>/root/opt/hcf/share/doc/<release>/...  (license files)
    <target>/<role>/root/var/vcap/jobs-src/<job>/...      (no job.MF)
    <target>/<role>/root/var/vcap/packages/<package>/...
"""

import logging
from pathlib import Path
from typing import Dict

from .. import constants
from ..config import BuilderConfig
from ..datacls import Role
from ..exceptions import AssemblyError, GenerationError
from ..utils.fs import copy_file, copy_tree, make_dirs, reset_dir, write_text
from .generate import generate_dockerfile, generate_run_script, generate_startup_script
from .naming import role_output_dir

logger = logging.getLogger(__name__)


def _in_root(root_dir: Path, image_path: str) -> Path:
    """Map an absolute path inside the image to its location under ``root_dir``."""
    return root_dir / image_path.lstrip("/")


class RoleContextAssembler:
    """
    Creates the Dockerfile directory of a role from its jobs, packages and scripts.

    Each call starts from an empty directory; a directory left by an earlier
    attempt is removed, never reused. On failure the partial directory stays
    in place for the caller to inspect or clean up.
    """

    def __init__(self, config: BuilderConfig):
        self.config = config

    def create_dockerfile_dir(self, role: Role) -> Path:
        """
        Assemble the build context for ``role``.

        Returns:
            Path of the role's context directory

        Raises:
            AssemblyError: On any generation or I/O failure, chaining the cause
        """
        if not role.jobs:
            raise AssemblyError(f"Role '{role.name}' has no jobs.")

        role_dir = role_output_dir(self.config.target_path, role.name)
        root_dir = role_dir / constants.IMAGE_ROOT_DIR
        logger.info(f"[Assembler] Creating build context for role '{role.name}' in '{role_dir}'...")

        try:
            reset_dir(role_dir)
            self._write_run_script(role, root_dir)
            self._copy_jobs(role, root_dir)
            self._copy_packages(role, root_dir)
            self._copy_licenses(role, root_dir)
            self._copy_startup_scripts(role, root_dir)
            # Dockerfile last: its presence marks a complete context
            write_text(role_dir / constants.DOCKERFILE_NAME, generate_dockerfile(role, self.config))
        except AssemblyError:
            raise
        except (GenerationError, OSError) as e:
            raise AssemblyError(f"Failed to assemble build context for role '{role.name}': {e}") from e

        logger.debug(f"[Assembler] Build context for role '{role.name}' complete.")
        return role_dir

    def _write_run_script(self, role: Role, root_dir: Path):
        content = generate_run_script(role, self.config)
        write_text(_in_root(root_dir, constants.RUN_SCRIPT_PATH), content, mode=constants.RUN_SCRIPT_MODE)

    def _copy_jobs(self, role: Role, root_dir: Path):
        """Job templates and monit file go to jobs-src; the raw job descriptor never does."""
        jobs_src = _in_root(root_dir, constants.JOBS_SRC_DIR)
        for job in role.jobs:
            job_dir = jobs_src / job.name
            count = copy_tree(
                job.templates_path,
                job_dir / constants.JOB_TEMPLATES_DIR,
                exclude=constants.EXCLUDED_JOB_FILES,
            )
            if job.monit_path.is_file():
                copy_file(job.monit_path, job_dir / constants.JOB_MONIT_NAME)
            else:
                logger.warning(f"[Assembler] Job '{job.name}' of role '{role.name}' has no monit file.")
            logger.debug(f"[Assembler] Copied {count} template file(s) of job '{job.name}'.")

    def _copy_packages(self, role: Role, root_dir: Path):
        packages_dir = _in_root(root_dir, constants.PACKAGES_DIR)
        make_dirs(packages_dir)
        fingerprints: Dict[str, str] = {}
        for job in role.jobs:
            for pkg in job.packages:
                if pkg.name in fingerprints:
                    if fingerprints[pkg.name] != pkg.fingerprint:
                        raise AssemblyError(
                            f"Role '{role.name}' uses package '{pkg.name}' with different fingerprints "
                            f"('{fingerprints[pkg.name]}' and '{pkg.fingerprint}')."
                        )
                    continue
                fingerprints[pkg.name] = pkg.fingerprint
                compiled_dir = pkg.compiled_dir(self.config.compiled_packages_path)
                if not compiled_dir.is_dir():
                    raise AssemblyError(
                        f"Compiled package '{pkg.name}' needed by role '{role.name}' not found at '{compiled_dir}'."
                    )
                copy_tree(compiled_dir, packages_dir / pkg.name)
                logger.debug(f"[Assembler] Copied compiled package '{pkg.name}' for role '{role.name}'.")

    def _copy_licenses(self, role: Role, root_dir: Path):
        """
        Release licenses land in share/doc/<release>/, package licenses in
        share/doc/<release>/<package>/<path inside the package>.
        """
        doc_dir = _in_root(root_dir, constants.DOC_DIR)
        for release in role.releases():
            for license_file in release.license_files():
                copy_file(license_file, doc_dir / release.name / license_file.name)

        written = set()
        for job in role.jobs:
            for pkg in job.packages:
                key = (job.release.name, pkg.name)
                if key in written:
                    continue
                written.add(key)
                compiled_dir = pkg.compiled_dir(self.config.compiled_packages_path)
                for rel_path in pkg.license_files(self.config.compiled_packages_path):
                    copy_file(compiled_dir / rel_path, doc_dir / job.release.name / pkg.name / rel_path)

    def _copy_startup_scripts(self, role: Role, root_dir: Path):
        startup_dir = _in_root(root_dir, constants.STARTUP_DIR)
        make_dirs(startup_dir)
        for script in role.scripts:
            if not script.is_file():
                raise AssemblyError(f"Startup script '{script}' of role '{role.name}' not found.")
            copy_file(script, startup_dir / script.name, mode=constants.STARTUP_SCRIPT_MODE)

        hook = startup_dir / role.startup_script_name
        if hook.exists():
            logger.debug(f"[Assembler] Role '{role.name}' supplies its own startup hook.")
            return
        write_text(hook, generate_startup_script(role, self.config), mode=constants.STARTUP_SCRIPT_MODE)
