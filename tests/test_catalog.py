"""
Course catalog loading and lookups.
"""
import pytest

from institute_pricing.catalog.course_catalog import CourseCatalog
from institute_pricing.errors import UnitNotFoundError


def test_from_records_parses_backend_shapes():
    catalog = CourseCatalog.from_records([
        {"id": 1, "name": "First Aid", "fee": "500.00", "duration": "1 day", "active": True},
        {"id": "2", "name": "Fire Safety", "fee": 1200, "active": "false"},
    ])
    assert len(catalog) == 2
    assert catalog.rate_for(1) == 500.0
    assert catalog.get("2").fee == 1200
    assert catalog.get(2).active is False


def test_from_records_skips_unusable_rows():
    catalog = CourseCatalog.from_records([
        {"id": None, "name": "No id", "fee": 100},
        {"id": 3, "name": "No fee", "fee": "tbd"},
        {"id": 4, "name": "Negative", "fee": -10},
        {"id": 5, "name": "Fine", "fee": 0},
    ])
    assert [u.id for u in catalog] == [5]


def test_resolve_unknown_unit_raises(catalog):
    with pytest.raises(UnitNotFoundError) as exc_info:
        catalog.resolve(42)
    assert exc_info.value.unit_id == 42
    assert 42 not in catalog
    assert catalog.get("not-a-number") is None


def test_search_excludes_inactive(catalog):
    names = [u.name for u in catalog.search()]
    assert "Forklift Operator" not in names
    assert [u.id for u in catalog.search("fire")] == [2]


def test_from_file_csv(tmp_path):
    path = tmp_path / "courses.csv"
    path.write_text(
        "ID,Name,Fee,Duration,Description,Active\n"
        "1,First Aid,500,1 day,,true\n"
        "2,Fire Safety,1200.50,2 days,Evacuation,false\n"
        "3,Broken,,1 day,,true\n",
        encoding="utf-8",
    )
    catalog = CourseCatalog.from_file(path)

    assert len(catalog) == 2
    assert catalog.rate_for(2) == 1200.50
    assert catalog.get(1).description == ""
    assert catalog.get(2).active is False


def test_from_file_missing_columns(tmp_path):
    path = tmp_path / "courses.csv"
    path.write_text("id,title\n1,First Aid\n", encoding="utf-8")
    with pytest.raises(ValueError, match="fee"):
        CourseCatalog.from_file(path)


def test_from_file_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        CourseCatalog.from_file(tmp_path / "nope.csv")


def test_to_frame_indexed_by_id(catalog):
    df = catalog.to_frame()
    assert list(df.index) == [1, 2, 3, 4, 5]
    assert df.loc[4, 'fee'] == 10000.0
