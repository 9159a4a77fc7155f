"""Storage backend using raw hierarchical file paths."""
import logging
from pathlib import Path
from typing import Optional

from ..errors import BackendUnavailable
from .address import StorageAddress
from .base_storage import StorageBackend, strip_line_separator

logger = logging.getLogger(__name__)


class DirectPathBackend(StorageBackend):
    """Stores each slot as a plain file under a storage root directory."""

    name = "direct-path"

    def __init__(self, root_dir: str):
        """
        Args:
            root_dir (str): Root of the shared storage tree. It is never
                created by the backend; only slot directories below it are.
        """
        self.root_dir = Path(root_dir)

    def _build_path(self, address: StorageAddress) -> Path:
        return self.root_dir.joinpath(*address.parts) / address.slot_name

    def _ensure_directory(self, directory: Path):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackendUnavailable(f"Failed to create directory {directory}: {e}") from e

    def write(self, address: StorageAddress, data: str) -> bool:
        filepath = self._build_path(address)
        try:
            self._ensure_directory(filepath.parent)
            with open(filepath, "w", encoding="utf-8", newline="") as f:
                f.write(data)
                f.flush()
        except BackendUnavailable as e:
            logger.error(str(e))
            return False
        except OSError as e:
            logger.error(f"Failed writing slot to {filepath}: {e}")
            return False

        logger.debug(f"Saved slot to {filepath}")
        return True

    def read(self, address: StorageAddress) -> Optional[str]:
        filepath = self._build_path(address)
        try:
            if not filepath.is_file():
                logger.info(f"Slot file does not exist: {filepath}")
                return None
            with open(filepath, "r", encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed reading slot from {filepath}: {e}")
            return None

        return strip_line_separator(content)

    def describe(self, address: StorageAddress) -> dict:
        filepath = self._build_path(address)
        try:
            exists = filepath.is_file()
        except OSError as e:
            return {"path": str(filepath), "error": str(e)}
        return {"path": str(filepath), "exists": exists}

    def __repr__(self):
        return f"<DirectPathBackend root_dir={self.root_dir}>"
