"""
roleforge Builder Module

- RoleImageBuilder: Bounded, fail-fast scheduling of role image builds
- RoleContextAssembler: Per-role Docker build context creation
- DockerImageBuilder: Image-build backend using the Docker CLI
- generate: Dockerfile, run.sh and startup hook rendering
- naming: Image names, tags and output directories

Usage:
    from roleforge.builder import RoleImageBuilder, DockerImageBuilder

    builder = RoleImageBuilder(config, backend=DockerImageBuilder())
    builder.build_role_images(roles, config.repository, config.version, worker_count=4)
"""

from .schedule import RoleImageBuilder, BuildQueue
from .assemble import RoleContextAssembler
from .backend import DockerImageBuilder
from .generate import generate_dockerfile, generate_run_script, generate_startup_script
from .naming import role_image_name, base_image_name, role_output_dir, role_dev_version, sanitize_tag

__all__ = [
    'RoleImageBuilder',
    'BuildQueue',
    'RoleContextAssembler',
    'DockerImageBuilder',
    'generate_dockerfile',
    'generate_run_script',
    'generate_startup_script',
    'role_image_name',
    'base_image_name',
    'role_output_dir',
    'role_dev_version',
    'sanitize_tag',
]
