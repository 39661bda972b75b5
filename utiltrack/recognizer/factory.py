import logging

from utiltrack.recognizer.base import ReadingRecognizer
from utiltrack.settings import settings

logger = logging.getLogger(__name__)


def get_recognizer() -> ReadingRecognizer:
    backend = settings.recognizer_backend

    if backend == "disabled":
        from utiltrack.recognizer.disabled import DisabledRecognizer

        logger.info("Using reading recognizer: disabled")
        return DisabledRecognizer()

    raise ValueError(f"Unsupported recognizer backend: {backend}")
