"""Clone the source image into a single destination region."""

from typing import Dict, List

from ..core import SourceImageSnapshot, get_logger
from ..core.protocols import ImageServiceProtocol
from .poller import CompletionPoller


class RegionCloneWorker:
    """Copy, wait, tag, grant: the pipeline run for each destination region."""

    def __init__(self, image_service: ImageServiceProtocol, poller: CompletionPoller):
        self._image_service = image_service
        self._poller = poller
        self._logger = get_logger("image-cloner.worker")

    def clone_to_region(
        self,
        snapshot: SourceImageSnapshot,
        launch_permissions: List[Dict[str, str]],
        source_region: str,
        destination_region: str,
    ) -> str:
        """
        Produce a fully configured copy of ``snapshot`` in ``destination_region``.

        Steps run strictly in order and the first failure propagates, so later
        steps never run for this region. Nothing already done is undone: a
        failed tag call leaves the untagged copy in place.

        Args:
            snapshot: Source image facts.
            launch_permissions: Grants to add to the new image.
            source_region: Region holding the source image.
            destination_region: Region to copy into.

        Returns:
            The ID of the new image.
        """
        self._logger.info(
            f"[{destination_region}] Copying {snapshot.image_id} from {source_region}"
        )
        image_id = self._image_service.copy_image(
            snapshot.image_id,
            snapshot.name,
            snapshot.description,
            source_region,
            destination_region,
        )

        self._logger.info(f"[{destination_region}] Waiting for {image_id} to finish copying")
        self._poller.await_completion(image_id, destination_region)

        if snapshot.tags:
            self._logger.debug(f"[{destination_region}] Tagging {image_id}")
            self._image_service.tag_image(image_id, destination_region, list(snapshot.tags))

        if launch_permissions:
            self._logger.debug(f"[{destination_region}] Granting launch permissions on {image_id}")
            self._image_service.modify_launch_permissions(
                image_id, destination_region, {"Add": list(launch_permissions)}
            )

        self._logger.info(f"[{destination_region}] Clone {image_id} is ready")
        return image_id
