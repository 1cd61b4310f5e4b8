"""
HueMatch Palette Store

Persistence collaborator for saved palettes. Stores are opaque document
services with three operations: put, query and subscribe. Subscribers get the
user's full palette list after every put, newest first.
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from supabase import Client, create_client

from huematch.config import config
from huematch.services.colors.palette import Palette, palette_from_document, palette_to_document
from huematch.utils.ids import extract_millis_from_palette_id, generate_palette_id
from huematch.utils.logging import get_logger

logger = get_logger()

PaletteListener = Callable[[List["SavedPalette"]], None]


class PaletteStoreError(RuntimeError):
    """Raised when the backing document store fails."""


@dataclass(frozen=True)
class SavedPalette:
    """A palette wrapped with its store-assigned identity."""
    id: str
    palette: Palette
    timestamp: datetime
    dominant_hex: str


def _parse_timestamp(value: Any, palette_id: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        # Postgres may return a trailing Z
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    # Rows without a timestamp fall back to the creation time in the id
    millis = extract_millis_from_palette_id(palette_id)
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def saved_palette_from_row(row: Mapping[str, Any]) -> SavedPalette:
    """Build a SavedPalette from a stored document row."""
    palette = palette_from_document(row)
    palette_id = str(row["id"])
    return SavedPalette(
        id=palette_id,
        palette=palette,
        timestamp=_parse_timestamp(row.get("timestamp"), palette_id),
        dominant_hex=row.get("dominantHex") or palette.dominant_hex,
    )


def palettes_from_rows(user_id: str, rows: Iterable[Mapping[str, Any]]) -> List[SavedPalette]:
    """
    Decode stored rows newest first, skipping rows that are not valid palettes.

    One corrupt row must not hide the rest of a user's saved palettes.
    """
    palettes = []
    for row in rows:
        try:
            palettes.append(saved_palette_from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed palette row", extra={
                "user_id": user_id,
                "palette_id": row.get("id"),
                "error": str(e)
            })
    return sort_newest_first(palettes)


def sort_newest_first(palettes: List[SavedPalette]) -> List[SavedPalette]:
    return sorted(palettes, key=lambda saved: saved.timestamp, reverse=True)


class PaletteStore(ABC):
    """Abstract base class for palette stores."""

    def __init__(self):
        self._listeners: Dict[str, List[PaletteListener]] = {}
        self._listeners_lock = threading.Lock()

    @abstractmethod
    def _insert(self, user_id: str, document: Dict[str, Any]) -> SavedPalette:
        """Persist a document and return it with id and timestamp assigned."""
        pass

    @abstractmethod
    def query(self, user_id: str) -> List[SavedPalette]:
        """Return all saved palettes for a user, newest first."""
        pass

    def put(self, user_id: str, document: Dict[str, Any]) -> SavedPalette:
        """
        Save a palette document for a user and notify subscribers.

        Args:
            user_id: Owner of the palette
            document: Palette document as produced by palette_to_document()

        Returns:
            The saved palette with id and timestamp

        Raises:
            ValueError: If the document is not a valid palette
            PaletteStoreError: If the backend rejects the write
        """
        # Re-encode so stored rows are canonical and carry dominantHex
        canonical = palette_to_document(palette_from_document(document))
        saved = self._insert(user_id, canonical)
        logger.info("Palette saved", extra={
            "user_id": user_id,
            "palette_id": saved.id,
            "dominant_hex": saved.dominant_hex
        })
        self._notify(user_id)
        return saved

    def subscribe(self, user_id: str, listener: PaletteListener) -> Callable[[], None]:
        """
        Register a listener for a user's palette list.

        The listener is called with the current list right away and after
        every subsequent put for that user.

        Returns:
            Callable that removes the listener
        """
        with self._listeners_lock:
            self._listeners.setdefault(user_id, []).append(listener)

        self._deliver(user_id, listener, self.query(user_id))

        def unsubscribe():
            with self._listeners_lock:
                listeners = self._listeners.get(user_id, [])
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    def _notify(self, user_id: str):
        with self._listeners_lock:
            listeners = list(self._listeners.get(user_id, []))
        if not listeners:
            return

        try:
            palettes = self.query(user_id)
        except PaletteStoreError as e:
            # The write already succeeded; listeners catch up on the next put
            logger.warning("Palette list refresh failed, listeners not notified", extra={
                "user_id": user_id,
                "error": str(e)
            })
            return
        for listener in listeners:
            self._deliver(user_id, listener, palettes)

    @staticmethod
    def _deliver(user_id: str, listener: PaletteListener, palettes: List[SavedPalette]):
        try:
            listener(palettes)
        except Exception as e:
            logger.error("Palette listener failed", extra={
                "user_id": user_id,
                "error": str(e)
            })


class InMemoryPaletteStore(PaletteStore):
    """Process-local palette store."""

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()
        self._rows: Dict[str, List[Dict[str, Any]]] = {}

    def _insert(self, user_id: str, document: Dict[str, Any]) -> SavedPalette:
        row = dict(document)
        row["id"] = generate_palette_id()
        row["timestamp"] = datetime.now(timezone.utc)

        saved = saved_palette_from_row(row)
        with self._lock:
            self._rows.setdefault(user_id, []).append(row)
        return saved

    def query(self, user_id: str) -> List[SavedPalette]:
        with self._lock:
            # Latest insert first so equal timestamps keep save order reversed
            rows = list(reversed(self._rows.get(user_id, [])))
        return palettes_from_rows(user_id, rows)


class SupabasePaletteStore(PaletteStore):
    """Palette store backed by a Supabase table."""

    def __init__(self, client: Client, table: str = None, app_id: str = None):
        super().__init__()
        self.client = client
        self.table = table or config.PALETTE_TABLE
        self.app_id = app_id or config.APP_ID

    def _insert(self, user_id: str, document: Dict[str, Any]) -> SavedPalette:
        row = dict(document)
        row.update({
            "id": generate_palette_id(),
            "app_id": self.app_id,
            "user_id": user_id,
        })
        try:
            response = self.client.table(self.table).insert(row).execute()
        except Exception as e:
            logger.error("Supabase insert failed", extra={"user_id": user_id, "error": str(e)})
            raise PaletteStoreError(f"Failed to save palette: {e}")

        if not response.data:
            raise PaletteStoreError("Failed to save palette: empty response")
        return saved_palette_from_row(response.data[0])

    def query(self, user_id: str) -> List[SavedPalette]:
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("app_id", self.app_id)
                .eq("user_id", user_id)
                .order("timestamp", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("Supabase query failed", extra={"user_id": user_id, "error": str(e)})
            raise PaletteStoreError(f"Failed to load palettes: {e}")

        return palettes_from_rows(user_id, response.data or [])


# Global store instance
_store: Optional[PaletteStore] = None


def create_palette_store(backend: str = None) -> PaletteStore:
    """Create a palette store for the configured backend."""
    backend = backend or config.STORE_BACKEND
    if not config.validate_store_backend(backend):
        raise ValueError(f"Unknown palette store backend: {backend}")

    if backend == "supabase":
        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for the supabase store")
        client = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)
        return SupabasePaletteStore(client)

    return InMemoryPaletteStore()


def get_palette_store() -> PaletteStore:
    """Get or create global palette store instance."""
    global _store
    if _store is None:
        _store = create_palette_store()
    return _store
