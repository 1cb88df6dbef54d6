import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from institute_pricing.catalog.course_catalog import CatalogUnit, CourseCatalog
from institute_pricing.config.settings import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and the real catalog file."""
    return Settings(project_root=tmp_path, catalog_path=tmp_path / 'courses.csv')


@pytest.fixture
def catalog():
    return CourseCatalog([
        CatalogUnit(id=1, name="Basic First Aid", fee=500.0, duration="1 day"),
        CatalogUnit(id=2, name="Fire Safety", fee=1200.0, duration="2 days"),
        CatalogUnit(id=3, name="Odd Rate Workshop", fee=333.335, duration="3 hours"),
        CatalogUnit(id=4, name="NEBOSH IGC", fee=10000.0, duration="10 days"),
        CatalogUnit(id=5, name="Forklift Operator", fee=1800.0, duration="3 days", active=False),
    ])


@pytest.fixture
def contact_details():
    return {
        "company_name": "Acme Logistics",
        "contact_person": "Sam Lee",
        "email": "sam@acmelogistics.com",
        "phone": "+971 50 000 0000",
    }
