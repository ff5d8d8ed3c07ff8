"""
Models package initialization
"""

from .rules import DisposalAction, Rule, RuleCatalog, DEFAULT_RULES
from .scan_record import ScanRecord, create_scan_record, parse_weight_grams
from .classification import ClassificationResult, Classifier, StaticClassifier
from .state import Feedback, RecyclingState, StateFormatError

__all__ = [
    'DisposalAction', 'Rule', 'RuleCatalog', 'DEFAULT_RULES',
    'ScanRecord', 'create_scan_record', 'parse_weight_grams',
    'ClassificationResult', 'Classifier', 'StaticClassifier',
    'Feedback', 'RecyclingState', 'StateFormatError',
]
