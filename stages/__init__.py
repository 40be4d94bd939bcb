"""Pipeline stages"""

from .s0_reception import Receiver
from .s1_classification import SheetClassifier
from .s2_budgeting import PayloadBudgeter
from .s3_request import ReportRequestBuilder
from .s4_analysis import ReportAnalyzer
from .s5_validation import ReportValidator

__all__ = [
    "Receiver",
    "SheetClassifier",
    "PayloadBudgeter",
    "ReportRequestBuilder",
    "ReportAnalyzer",
    "ReportValidator",
]
