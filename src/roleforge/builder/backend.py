"""
Docker Image Build Backend

Builds role images through the Docker CLI using python_on_whales.
"""

import logging
from pathlib import Path
from typing import Optional

from python_on_whales import DockerClient
from python_on_whales.exceptions import DockerException

from ..exceptions import BuildBackendError

logger = logging.getLogger(__name__)


class DockerImageBuilder:
    """
    ImageBuilderProtocol implementation backed by ``docker build``.

    Each call spawns its own docker CLI process, so concurrent builds of
    distinct images do not share state.
    """

    def __init__(self, client: Optional[DockerClient] = None, pull: bool = False):
        self.client = client or DockerClient()
        self.pull = pull

    def build(self, context_dir: Path, image_name: str) -> None:
        logger.info(f"[Docker] Building image '{image_name}' from '{context_dir}'...")
        try:
            self.client.build(
                str(context_dir),
                tags=[image_name],
                pull=self.pull,
                load=True,
            )
        except DockerException as e:
            raise BuildBackendError(f"Docker build of image '{image_name}' failed: {e}", image_name=image_name) from e
        logger.info(f"[Docker] Image '{image_name}' built.")
