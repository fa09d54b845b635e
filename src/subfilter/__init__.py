"""subfilter - keeps a subscription feed filtered by per-channel rules."""

from subfilter.classifier import classify
from subfilter.matcher import should_hide
from subfilter.models import Category, Rule
from subfilter.reconciler import reconcile, reset_all

__version__ = "0.1.0"

__all__ = [
    "Category",
    "Rule",
    "classify",
    "should_hide",
    "reconcile",
    "reset_all",
]
