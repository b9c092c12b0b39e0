"""Wait for a copied image to leave its in-progress state."""

import time
from typing import Callable

from ..core import get_logger
from ..core.constants import IMAGE_STATE_AVAILABLE, IMAGE_STATE_PENDING
from ..core.protocols import ImageServiceProtocol


class CompletionPoller:
    """
    Blocks until an image reaches a terminal lifecycle state.

    Every tick waits one interval and then describes the image. While the
    state is ``pending`` the poller keeps going; any other state ends the wait
    and is returned to the caller uninterpreted. An interval of zero polls as
    fast as the describe call allows.

    Errors from the describe call end the wait immediately. Retrying a single
    describe is the image service's job, not the poller's.
    """

    def __init__(
        self,
        image_service: ImageServiceProtocol,
        interval_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._image_service = image_service
        self._interval_seconds = interval_seconds
        self._sleep = sleep
        self._logger = get_logger("image-cloner.poller")

    def await_completion(self, image_id: str, region: str) -> str:
        """Wait for ``image_id`` in ``region`` to finish copying; returns its final state."""
        ticks = 0
        while True:
            self._sleep(self._interval_seconds)
            ticks += 1
            state = self._image_service.describe_image(image_id, region).get("State")
            self._logger.debug(f"[{region}] {image_id} state after {ticks} check(s): {state}")
            if state != IMAGE_STATE_PENDING:
                break

        if state != IMAGE_STATE_AVAILABLE:
            self._logger.warning(
                f"[{region}] {image_id} finished copying in state {state!r}; continuing"
            )
        return state
