import logging

from utiltrack.recognizer.base import ReadingRecognizer

logger = logging.getLogger(__name__)


class DisabledRecognizer(ReadingRecognizer):
    """Recognition turned off: never finds a value."""

    def recognize(self, image: bytes) -> str:
        logger.info("Reading recognition is disabled, ignoring %d-byte image", len(image))
        return ""
