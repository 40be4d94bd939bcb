"""Stage 2: Payload Budgeting"""

from .budgeter import PayloadBudgeter

__all__ = ["PayloadBudgeter"]
