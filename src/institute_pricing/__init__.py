"""
Institute Pricing Package

Derived pricing for the institute's quotations, proposals and invoices.
Recomputes subtotal, discount and final amount from line items that
snapshot course fees from the catalog.
"""

__version__ = "1.0.0"
