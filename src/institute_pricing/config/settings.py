"""
Centralized settings and per-document policy for the pricing tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass(frozen=True)
class DocumentPolicy:
    """Static pricing behaviour for one document kind."""
    discount_mode: str  # "percent" or "absolute"
    rounding: str  # "per_line" or "subtotal"
    statuses: tuple
    default_status: str
    endpoint: str


DOCUMENT_POLICIES: dict[str, DocumentPolicy] = {
    'quotation': DocumentPolicy(
        discount_mode='absolute',
        rounding='per_line',
        statuses=('pending', 'accepted', 'rejected'),
        default_status='pending',
        endpoint='/api/quotations',
    ),
    'proposal': DocumentPolicy(
        discount_mode='percent',
        rounding='subtotal',
        statuses=('draft', 'sent', 'accepted', 'rejected'),
        default_status='draft',
        endpoint='/api/proposals',
    ),
    'invoice': DocumentPolicy(
        discount_mode='absolute',
        rounding='per_line',
        statuses=('pending', 'paid'),
        default_status='pending',
        endpoint='/api/invoices',
    ),
}


def get_policy(kind: str) -> DocumentPolicy:
    """Look up the policy for a document kind."""
    try:
        return DOCUMENT_POLICIES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown document kind '{kind}'. Expected one of: {', '.join(DOCUMENT_POLICIES)}"
        ) from None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    catalog_path: Path

    # Pricing policy
    max_discount_percent: float = 20.0
    currency: str = 'AED'
    precision: int = 2

    # Backend collaborator
    backend_url: str = 'http://localhost:5000'
    request_timeout: float = 10.0

    # Logging
    log_level: str = 'INFO'
    log_json: bool = False

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment on top of the project layout."""
        root = project_root or get_project_root()
        catalog_path = os.getenv('PRICING_CATALOG_PATH')

        return cls(
            project_root=root,
            catalog_path=Path(catalog_path) if catalog_path else root / 'data' / 'courses.csv',
            max_discount_percent=float(os.getenv('PRICING_MAX_DISCOUNT_PERCENT', '20')),
            currency=os.getenv('PRICING_CURRENCY', 'AED'),
            backend_url=os.getenv('PRICING_BACKEND_URL', 'http://localhost:5000').rstrip('/'),
            request_timeout=float(os.getenv('PRICING_REQUEST_TIMEOUT', '10')),
            log_level=os.getenv('PRICING_LOG_LEVEL', 'INFO').upper(),
            log_json=_env_bool('PRICING_LOG_JSON', False),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
