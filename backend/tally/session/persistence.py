"""JSON persistence for the application state bundle.

Storage problems never reach the caller: a bundle that cannot be read or
decoded loads as None (the caller starts from defaults) and a failed write
is logged and dropped. A lost write is preferred over blocking the user.
"""

import json

import structlog
from pydantic import ValidationError

from shared.storage import BlobStore
from tally.session.models import PersistedBundle

logger = structlog.get_logger()

DEFAULT_STATE_FILE = "appstate.json"


def encode_bundle(bundle: PersistedBundle) -> bytes:
    """Serialize with sorted keys so successive files diff cleanly."""
    data = bundle.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False).encode("utf-8")


def decode_bundle(data: bytes) -> PersistedBundle:
    """Parse a stored bundle. Raises ValidationError on malformed or mismatched data."""
    return PersistedBundle.model_validate_json(data)


class StatePersistence:
    """Loads and saves the bundle as a single blob."""

    def __init__(self, store: BlobStore, filename: str = DEFAULT_STATE_FILE) -> None:
        self._store = store
        self._filename = filename

    def load(self) -> PersistedBundle | None:
        try:
            data = self._store.read(self._filename)
        except (OSError, ValueError) as exc:
            logger.warning("failed to read state", filename=self._filename, error=str(exc))
            return None
        if data is None:
            return None
        try:
            return decode_bundle(data)
        except ValidationError as exc:
            logger.warning("discarding unreadable state", filename=self._filename, error_count=exc.error_count())
            return None

    def save(self, bundle: PersistedBundle) -> None:
        content = encode_bundle(bundle)
        try:
            self._store.write(self._filename, content)
        except (OSError, ValueError) as exc:
            logger.warning("failed to save state", filename=self._filename, error=str(exc))
