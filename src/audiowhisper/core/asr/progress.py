from typing import Callable, List

from ...utils.logger import get_logger

logger = get_logger(__name__)

ProgressListener = Callable[[float], None]


class ProgressNotifier:
    """
    Fire-and-forget fan-out of transcription progress (0.0-1.0).

    Listeners are plain callables. A listener that raises is logged and
    skipped; it never interrupts the transcription that published the value.
    """

    def __init__(self):
        self._listeners: List[ProgressListener] = []

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, progress: float) -> None:
        for listener in list(self._listeners):
            try:
                listener(progress)
            except Exception as e:
                logger.warning(f"Progress listener failed: {e}")
