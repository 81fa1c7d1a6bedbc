"""
Role Image Build Units

BuildJob is the scheduler's unit of work: one role, the image it becomes,
and the outcome once a worker has handled it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .model import Role


@dataclass
class BuildJob:
    """A (role, image name) pair with its completion outcome."""
    role: Role
    image_name: str
    context_dir: Optional[Path] = None
    error: Optional[BaseException] = None
    done: bool = False

    @property
    def succeeded(self) -> bool:
        return self.done and self.error is None

    def finish(self, error: Optional[BaseException] = None):
        self.error = error
        self.done = True
