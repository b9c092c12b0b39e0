"""Copy an EC2 image, its tags and launch permissions to other regions."""

from .cloning import ImageCloner, clone_image
from .core import CloneReport, RegionOutcome

__version__ = "0.1.0"

__all__ = ["ImageCloner", "clone_image", "CloneReport", "RegionOutcome", "__version__"]
