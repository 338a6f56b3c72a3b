"""Rate table loader — read an override table from disk or use the built-in one."""
import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from ..errors import RateTableError
from .defaults import DEFAULT_RATE_TABLE
from .schema import RateTable

logger = logging.getLogger(__name__)

# Optional JSON file replacing the built-in table
RATES_PATH_ENV = "SHIPPING_RATES_PATH"


class RateTableLoader:
    """Loads and caches the active rate table.

    With no path configured the built-in table is used. A configured path
    must exist and hold a valid table; falling back silently would price
    orders with the wrong rates.
    """

    def __init__(self, rates_path: Path | None = None):
        if rates_path is None and os.environ.get(RATES_PATH_ENV):
            rates_path = Path(os.environ[RATES_PATH_ENV]).expanduser()
        self._path = rates_path
        self._cached: RateTable | None = None

    @property
    def path(self) -> Path | None:
        return self._path

    def exists(self) -> bool:
        """Check if an override table is configured and present on disk."""
        return self._path is not None and self._path.exists()

    def load(self) -> RateTable:
        """Return the active rate table, reading the override file once."""
        if self._cached is not None:
            return self._cached
        if self._path is None:
            self._cached = DEFAULT_RATE_TABLE
            return self._cached
        if not self._path.exists():
            raise RateTableError(f"Rate table not found: {self._path}")

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RateTableError(f"Could not read rate table {self._path}: {e}") from e

        try:
            self._cached = RateTable.model_validate(data)
        except ValidationError as e:
            raise RateTableError(f"Invalid rate table {self._path}: {e}") from e

        logger.info(
            "Loaded rate table from %s (%d zones, %d speeds)",
            self._path, len(self._cached.zones), len(self._cached.speeds),
        )
        return self._cached

    def save(self, table: RateTable) -> None:
        """Write a table to the configured path, e.g. to seed an override file."""
        if self._path is None:
            raise RateTableError("No rate table path configured")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(table.model_dump(mode="json"), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        self._cached = table
        logger.info("Rate table saved to %s", self._path)

    def clear_cache(self) -> None:
        """Drop the cached table so the next load re-reads the file."""
        self._cached = None
