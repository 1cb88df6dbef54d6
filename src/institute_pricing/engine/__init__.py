"""Engine subpackage - derived pricing for line-item documents."""
from .calculator import PricingCalculator, compute_totals
from .discount_policy import DiscountPolicy
from .models import PricingDocument, LineItem, Totals

__all__ = ['PricingCalculator', 'compute_totals', 'DiscountPolicy', 'PricingDocument', 'LineItem', 'Totals']
