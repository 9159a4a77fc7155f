"""
Catalog-mediated storage.

`CatalogService` is a local content catalog: records are indexed in TinyDB by
display name and relative path, and their content lives in blob files next to
the index. Callers never see blob paths; they insert or query records and open
streams on the returned handles. `CatalogBackend` implements the slot contract
on top of it.
"""
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Dict, Any

from tinydb import TinyDB, Query

from ..errors import BackendUnavailable
from .address import StorageAddress
from .base_storage import StorageBackend, strip_line_separator

logger = logging.getLogger(__name__)

GENERIC_BINARY_MIME_TYPE = "application/octet-stream"


def normalize_relative_path(relative_path: str) -> str:
    """Catalog form of a directory: no leading slash, one trailing slash."""
    parts = [p for p in (relative_path or "").split("/") if p]
    if not parts:
        return ""
    return "/".join(parts) + "/"


class CatalogService:
    """
    TinyDB-indexed catalog of named records with blob content.

    The catalog directory and index are opened on first use. Index or
    filesystem failures surface as `BackendUnavailable`.
    """

    table_name = "files"

    def __init__(self, catalog_dir: str):
        self.catalog_dir = Path(catalog_dir)
        self.blob_dir = self.catalog_dir / "blobs"
        self.db_path = self.catalog_dir / "catalog.json"
        self.db = None

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except (OSError, ValueError) as e:
            raise BackendUnavailable(f"Catalog {action} failed: {e}") from e

    def get_table(self):
        if self.db is None:
            with self._guard("open"):
                self.blob_dir.mkdir(parents=True, exist_ok=True)
                self.db = TinyDB(str(self.db_path))
        return self.db.table(self.table_name)

    def _get_record(self, handle: int):
        with self._guard("lookup"):
            record = self.get_table().get(doc_id=handle)
        if record is None:
            raise BackendUnavailable(f"No catalog record with handle {handle}")
        return record

    def insert_record(self, display_name: str, mime_type: str, relative_path: str) -> int:
        """
        Register a new record and return its handle.

        Inserting never replaces an existing record, even one with the same
        display name and relative path.
        """
        record = {
            "display_name": display_name,
            "mime_type": mime_type,
            "relative_path": normalize_relative_path(relative_path),
            "blob": uuid.uuid4().hex,
            "date_added": datetime.utcnow().isoformat(),
        }
        with self._guard(f"insert for {display_name}"):
            return self.get_table().insert(record)

    def query(self, relative_path: str, display_name: str) -> List[int]:
        """Return handles of exactly matching records, most recent first."""
        q = Query()
        with self._guard(f"query for {display_name}"):
            results = self.get_table().search(
                (q.relative_path == normalize_relative_path(relative_path))
                & (q.display_name == display_name)
            )
        return sorted((record.doc_id for record in results), reverse=True)

    @contextmanager
    def open_stream(self, handle: int, mode: str = "r"):
        """
        Open the content of a record as a binary stream.

        Args:
            handle (int): Handle returned by `insert_record` or `query`.
            mode (str): "r" to read, "w" to truncate and write.
        """
        if mode not in ("r", "w"):
            raise ValueError(f"Unsupported stream mode: '{mode}'")

        record = self._get_record(handle)
        path = self.blob_dir / record["blob"]
        try:
            stream = open(path, mode + "b")
        except OSError as e:
            raise BackendUnavailable(f"Cannot open stream for record {handle}: {e}") from e

        with stream:
            yield stream

    def delete_record(self, handle: int):
        record = self._get_record(handle)
        with self._guard(f"delete of record {handle}"):
            (self.blob_dir / record["blob"]).unlink(missing_ok=True)
            self.get_table().remove(doc_ids=[handle])

    def list_records(self, relative_path: Optional[str] = None) -> List[Dict[str, Any]]:
        """Record metadata, optionally restricted to one relative path."""
        with self._guard("listing"):
            table = self.get_table()
            if relative_path is None:
                records = table.all()
            else:
                records = table.search(Query().relative_path == normalize_relative_path(relative_path))
        return [{**record, "doc_id": record.doc_id} for record in records]

    def close(self):
        if self.db is not None:
            self.db.close()
            self.db = None


class CatalogBackend(StorageBackend):
    """
    Slot storage through a `CatalogService`.

    Every write inserts a new record. With `replace_existing`, older records
    at the address are deleted once the new record is fully written, so the
    slot ends up holding one record and a failed write keeps the old one.
    """

    name = "catalog"

    def __init__(self, catalog: CatalogService, replace_existing: bool = False):
        self.catalog = catalog
        self.replace_existing = replace_existing

    def _remove_older(self, address: StorageAddress, keep: int):
        try:
            handles = self.catalog.query(address.normalized_directory, address.slot_name)
            for handle in handles:
                if handle != keep:
                    self.catalog.delete_record(handle)
                    logger.debug(f"Removed previous record {handle} at {address}")
        except BackendUnavailable as e:
            logger.warning(f"Could not remove previous records at {address}: {e}")

    def _discard(self, handle: int):
        try:
            self.catalog.delete_record(handle)
        except BackendUnavailable as e:
            logger.warning(f"Could not discard incomplete record {handle}: {e}")

    def write(self, address: StorageAddress, data: str) -> bool:
        try:
            handle = self.catalog.insert_record(
                display_name=address.slot_name,
                mime_type=GENERIC_BINARY_MIME_TYPE,
                relative_path=address.normalized_directory,
            )
        except BackendUnavailable as e:
            logger.error(f"Catalog save to {address} failed: {e}")
            return False

        try:
            with self.catalog.open_stream(handle, "w") as stream:
                stream.write(data.encode("utf-8"))
                stream.flush()
        except (BackendUnavailable, OSError) as e:
            logger.error(f"Catalog save to {address} failed: {e}")
            self._discard(handle)
            return False

        if self.replace_existing:
            self._remove_older(address, keep=handle)

        logger.debug(f"Saved slot to catalog record {handle} at {address}")
        return True

    def read(self, address: StorageAddress) -> Optional[str]:
        try:
            handles = self.catalog.query(address.normalized_directory, address.slot_name)
        except BackendUnavailable as e:
            logger.error(f"Catalog lookup at {address} failed: {e}")
            return None

        if not handles:
            logger.info(f"No catalog record at {address}")
            return None

        try:
            with self.catalog.open_stream(handles[0], "r") as stream:
                content = stream.read().decode("utf-8")
        except (BackendUnavailable, OSError, UnicodeDecodeError) as e:
            logger.error(f"Reading catalog record {handles[0]} at {address} failed: {e}")
            return None

        return strip_line_separator(content)

    def describe(self, address: StorageAddress) -> dict:
        try:
            records = self.catalog.list_records(address.normalized_directory)
        except BackendUnavailable as e:
            return {"error": str(e)}
        return {"records": len([r for r in records if r["display_name"] == address.slot_name])}

    def __repr__(self):
        return f"<CatalogBackend catalog_dir={self.catalog.catalog_dir} replace_existing={self.replace_existing}>"
