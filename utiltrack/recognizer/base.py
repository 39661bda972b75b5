import logging
import re
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

_NOT_NUMERIC = re.compile(r"[^\d.,]")


class ReadingRecognizer(ABC):
    @abstractmethod
    def recognize(self, image: bytes) -> str:
        """Return the meter value shown in ``image`` as text, or '' if none was found."""
        ...


def recognize_reading(recognizer: ReadingRecognizer, image: bytes) -> str:
    """Run ``recognizer`` and reduce its answer to a numeric string.

    Any failure yields '' so the reading field is simply left empty.
    """
    if not image:
        return ""
    try:
        raw = recognizer.recognize(image)
    except Exception:
        logger.exception("Reading recognition failed with %s", type(recognizer).__name__)
        return ""
    value = _NOT_NUMERIC.sub("", raw or "")
    logger.debug("Recognized reading %r (raw=%r)", value, raw)
    return value
