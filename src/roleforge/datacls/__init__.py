"""
roleforge Data Classes

- model: Release, Package, Job, RoleRun and Role models
- contexts: BuildJob, the scheduler's unit of work
"""

from .model import Release, Package, Job, RoleRun, Role
from .contexts import BuildJob

__all__ = [
    'Release',
    'Package',
    'Job',
    'RoleRun',
    'Role',
    'BuildJob',
]
