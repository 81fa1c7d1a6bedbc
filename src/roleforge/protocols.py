"""
roleforge Protocol Definitions

Protocols are the foundation layer with zero dependencies on other roleforge modules.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable


# ============================================================================
# Image Build Backend Protocols
# ============================================================================

@runtime_checkable
class ImageBuilderProtocol(Protocol):
    """
    Protocol for the backend that turns a build context into an image.

    Implementations must be safe to call from several threads at once for
    distinct image names.
    """

    def build(self, context_dir: Path, image_name: str) -> None:
        """
        Build ``image_name`` from the Dockerfile directory ``context_dir``.

        Args:
            context_dir: Directory holding the Dockerfile and the root/ tree
            image_name: Full image name including tag

        Raises:
            Exception: Any failure; the scheduler records it as the role's failure
        """
        ...
