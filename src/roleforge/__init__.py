"""
roleforge

Builds one container image per role of a distributed application from the
role's jobs, compiled packages and startup scripts.

Main modules:
- builder: Naming, artifact generation, build context assembly and scheduling
- config: Builder settings and role manifest loading
- datacls: Role data model and build units
- utils: Logging and filesystem helpers

Quick start example:
```python
from roleforge import BuilderConfig, RoleManifest, RoleImageBuilder, DockerImageBuilder

config = BuilderConfig(repository="hcf", compiled_packages_path="compiled",
                       target_path="output", version="1.0.0", base_image_version="0.1.0")
roles = RoleManifest("roles.yml").roles
RoleImageBuilder(config, backend=DockerImageBuilder()).build_role_images(
    roles, config.repository, config.version, worker_count=4)
```
"""

from .protocols import ImageBuilderProtocol
from .config import BuilderConfig, RoleManifest
from .datacls import Release, Package, Job, RoleRun, Role, BuildJob
from .builder import RoleImageBuilder, RoleContextAssembler, DockerImageBuilder
from .exceptions import (
    RoleForgeError,
    ConfigurationError,
    ConfigValidationError,
    BuildError,
    GenerationError,
    AssemblyError,
    BuildBackendError,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    '__version__',
    # Protocols
    'ImageBuilderProtocol',
    # Config
    'BuilderConfig',
    'RoleManifest',
    # Model
    'Release',
    'Package',
    'Job',
    'RoleRun',
    'Role',
    'BuildJob',
    # Builder
    'RoleImageBuilder',
    'RoleContextAssembler',
    'DockerImageBuilder',
    # Exceptions
    'RoleForgeError',
    'ConfigurationError',
    'ConfigValidationError',
    'BuildError',
    'GenerationError',
    'AssemblyError',
    'BuildBackendError',
]
