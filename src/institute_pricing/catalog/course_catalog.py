"""
Course Catalog - Read-only course list used to snapshot line item rates.

Loaded once per session, either from the backend's /api/courses records
or from a CSV/Excel export.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd
import structlog

from ..errors import UnitNotFoundError
from ..utils.numbers import coerce_number

logger = structlog.get_logger(__name__)

CATALOG_COLUMNS = ['id', 'name', 'fee', 'duration', 'description', 'active']


@dataclass(frozen=True)
class CatalogUnit:
    """A course as offered in the catalog."""
    id: int
    name: str
    fee: float
    duration: str = ""
    description: str = ""
    active: bool = True


def _parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ('false', '0', 'no', 'n', '')
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return True
    return bool(value)


def _text(value) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


class CourseCatalog:
    """
    Immutable lookup of catalog units by id.

    A refreshed catalog is a new instance; line items that already
    snapshotted a rate are never touched by it.
    """

    def __init__(self, units: Iterable[CatalogUnit] = ()):
        self._units: dict[int, CatalogUnit] = {}
        for unit in units:
            self._units[unit.id] = unit

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> 'CourseCatalog':
        """
        Build from backend JSON records.

        Fees may arrive as numeric strings. Records without a usable id or
        fee are skipped.
        """
        units = []
        for record in records:
            raw_id = record.get('id')
            try:
                unit_id = int(raw_id)
            except (TypeError, ValueError):
                logger.warning("catalog_record_skipped", reason="invalid id", id=raw_id)
                continue

            raw_fee = record.get('fee')
            fee = None if raw_fee is None or raw_fee == "" else coerce_number(raw_fee, fallback=None)
            if fee is None or fee < 0:
                logger.warning("catalog_record_skipped", reason="invalid fee", id=unit_id, fee=record.get('fee'))
                continue

            units.append(CatalogUnit(
                id=unit_id,
                name=_text(record.get('name')) or f"Course {unit_id}",
                fee=fee,
                duration=_text(record.get('duration')),
                description=_text(record.get('description')),
                active=_parse_bool(record.get('active', True)),
            ))
        return cls(units)

    @classmethod
    def from_file(cls, path: Path) -> 'CourseCatalog':
        """Load a catalog export (.csv, .xlsx or .xls)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Course catalog not found at {path}")

        if path.suffix.lower() in ('.xlsx', '.xls'):
            df = pd.read_excel(path, dtype={'id': str})
        else:
            df = pd.read_csv(path, dtype={'id': str})

        # Normalize headers
        df.columns = [str(c).strip().lower() for c in df.columns]
        missing = {'id', 'name', 'fee'} - set(df.columns)
        if missing:
            raise ValueError(f"Course catalog {path.name} is missing columns: {', '.join(sorted(missing))}")

        records = df.where(pd.notna(df), None).to_dict(orient='records')
        catalog = cls.from_records(records)
        logger.info("catalog_loaded", path=str(path), units=len(catalog))
        return catalog

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, unit_id) -> bool:
        return self.get(unit_id) is not None

    def __iter__(self):
        return iter(self._units.values())

    def get(self, unit_id) -> Optional[CatalogUnit]:
        """Return the unit for ``unit_id`` or None."""
        try:
            return self._units.get(int(unit_id))
        except (TypeError, ValueError):
            return None

    def resolve(self, unit_id) -> CatalogUnit:
        """Return the unit for ``unit_id`` or raise UnitNotFoundError."""
        unit = self.get(unit_id)
        if unit is None:
            raise UnitNotFoundError(unit_id)
        return unit

    def rate_for(self, unit_id) -> float:
        """Current fee for ``unit_id``."""
        return self.resolve(unit_id).fee

    def active_units(self) -> list[CatalogUnit]:
        return [u for u in self._units.values() if u.active]

    def search(self, term: Optional[str] = None) -> list[CatalogUnit]:
        """Active units whose name or description contains ``term``."""
        units = self.active_units()
        if not term:
            return units
        term = term.lower()
        return [u for u in units if term in u.name.lower() or term in u.description.lower()]

    def to_frame(self) -> pd.DataFrame:
        """Catalog as a DataFrame indexed by course id."""
        df = pd.DataFrame(
            [[u.id, u.name, u.fee, u.duration, u.description, u.active] for u in self._units.values()],
            columns=CATALOG_COLUMNS,
        )
        return df.set_index('id')
