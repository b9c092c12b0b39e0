"""The cloning pipeline: poll, per-region worker and orchestrator."""

from .poller import CompletionPoller
from .region_worker import RegionCloneWorker
from .orchestrator import ImageCloner, clone_image

__all__ = [
    "CompletionPoller",
    "RegionCloneWorker",
    "ImageCloner",
    "clone_image",
]
