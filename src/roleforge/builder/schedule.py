"""
Role Image Scheduler Module

Drives role builds through a bounded pool of worker threads. Workers take
roles from one ordered queue; the first failure closes the queue so no new
role starts, in-flight roles finish, and the first error is raised.
"""

import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from ..config import BuilderConfig
from ..datacls import BuildJob, Role
from ..exceptions import BuildBackendError, ConfigurationError
from ..protocols import ImageBuilderProtocol
from .assemble import RoleContextAssembler
from .naming import role_image_name

logger = logging.getLogger(__name__)


class BuildQueue:
    """
    Ordered queue of build jobs that closes on the first recorded failure.

    Dequeueing and recording a failure share one lock, so once ``fail`` has
    returned no worker can receive another job. Only the first failure is
    kept; later ones are reported as discarded.
    """

    def __init__(self, jobs: Iterable[BuildJob]):
        self._jobs = deque(jobs)
        self._lock = threading.Lock()
        self._failed: Optional[BuildJob] = None

    def next(self) -> Optional[BuildJob]:
        with self._lock:
            if self._failed is not None or not self._jobs:
                return None
            return self._jobs.popleft()

    def fail(self, job: BuildJob) -> bool:
        """Record ``job`` as failed. Returns True if it is the first failure."""
        with self._lock:
            if self._failed is not None:
                return False
            self._failed = job
            return True

    @property
    def failed(self) -> Optional[BuildJob]:
        with self._lock:
            return self._failed

    @property
    def pending(self) -> int:
        """Jobs never handed to a worker."""
        with self._lock:
            return len(self._jobs)


class RoleImageBuilder:
    """
    Builds the images of many roles concurrently.

    The image-build backend is injected; with ``skip_build`` the backend is
    never called and may be omitted.
    """

    def __init__(
        self,
        config: BuilderConfig,
        backend: Optional[ImageBuilderProtocol] = None,
        assembler: Optional[RoleContextAssembler] = None,
    ):
        self.config = config
        self.backend = backend
        self.assembler = assembler or RoleContextAssembler(config)
        logger.debug(f"RoleImageBuilder initialized. Output dir: '{config.target_path}'")

    def build_role_images(
        self,
        roles: List[Role],
        repository: str,
        version: str,
        skip_build: bool = False,
        worker_count: int = 1,
    ) -> List[BuildJob]:
        """
        Build one image per role with at most ``worker_count`` builds at a time.

        Args:
            roles: Roles to build, dispatched in list order
            repository: Repository prefix of the image names
            version: Tag of the images
            skip_build: Only assemble the build contexts
            worker_count: Number of concurrent workers, at least 1

        Returns:
            The finished build jobs, in list order

        Raises:
            ConfigurationError: Invalid worker count, duplicate roles or no backend
            RoleForgeError: The first failure of any role
        """
        if worker_count < 1:
            raise ConfigurationError(f"Invalid worker count {worker_count}: at least one worker is required.")
        if not skip_build and self.backend is None:
            raise ConfigurationError("No image-build backend configured; use skip_build to only assemble contexts.")
        names = [role.name for role in roles]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(f"Roles scheduled more than once: {', '.join(duplicates)}")

        jobs = [BuildJob(role=role, image_name=role_image_name(repository, role.name, version)) for role in roles]
        queue = BuildQueue(jobs)
        logger.info(f"[Scheduler] Building {len(jobs)} role image(s) with {worker_count} worker(s)...")

        with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="role-build") as executor:
            workers = [executor.submit(self._work, queue, skip_build) for _ in range(worker_count)]
            for worker in workers:
                worker.result()

        failed = queue.failed
        if failed is not None:
            logger.error(
                f"[Scheduler] Build stopped by role '{failed.role.name}'; "
                f"{queue.pending} role(s) were not started."
            )
            raise failed.error

        logger.info(f"[Scheduler] All {len(jobs)} role image(s) done.")
        return jobs

    def _work(self, queue: BuildQueue, skip_build: bool):
        while True:
            job = queue.next()
            if job is None:
                return
            try:
                self._build(job, skip_build)
            except Exception as e:
                job.finish(e)
                if queue.fail(job):
                    logger.error(f"[Scheduler] Role '{job.role.name}' failed: {e}")
                else:
                    logger.warning(f"[Scheduler] Role '{job.role.name}' also failed (discarded): {e}")
            else:
                job.finish()

    def _build(self, job: BuildJob, skip_build: bool):
        role = job.role
        logger.info(f"[Scheduler] Creating Dockerfile for role '{role.name}'...")
        job.context_dir = self.assembler.create_dockerfile_dir(role)

        if skip_build:
            logger.info(f"[Scheduler] Skipping image build of role '{role.name}'.")
            return

        logger.info(f"[Scheduler] Building image '{job.image_name}' for role '{role.name}'...")
        try:
            self.backend.build(job.context_dir, job.image_name)
        except Exception as e:
            raise BuildBackendError(
                f"Failed to build image '{job.image_name}' for role '{role.name}': {e}",
                image_name=job.image_name,
            ) from e
        logger.info(f"[Scheduler] Image '{job.image_name}' for role '{role.name}' built.")
