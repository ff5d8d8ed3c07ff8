"""
Utilities package initialization
"""

from .history_ledger import append, update_weight, clear_history, find_record
from .impact import compute_waste_diverted, monthly_breakdown, impact_summary
from .feedback_tracker import record_correct, record_incorrect, accuracy
from .active_item import set_active, get_active, select_from_history, reset_view
from .state_store import JsonFileStore, MemoryStore, StatePersistence
from .report_log import MisclassificationReport, ReportLog

__all__ = [
    'append', 'update_weight', 'clear_history', 'find_record',
    'compute_waste_diverted', 'monthly_breakdown', 'impact_summary',
    'record_correct', 'record_incorrect', 'accuracy',
    'set_active', 'get_active', 'select_from_history', 'reset_view',
    'JsonFileStore', 'MemoryStore', 'StatePersistence',
    'MisclassificationReport', 'ReportLog',
]
