"""Stage 1: Sheet Classification"""

from .classifier import SheetClassifier

__all__ = ["SheetClassifier"]
