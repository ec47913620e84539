"""
Core — Session state and the operations that read and change it
"""

from .program import Program, SourceFile
from .accumulator import ProgramAccumulator, ResetSource
from .discovery import Project, discover_project, find_project
from .evaluation import ExpressionEvaluator
from .history import History, HistoryEntry

__all__ = [
    'Program', 'SourceFile',
    'ProgramAccumulator', 'ResetSource',
    'Project', 'discover_project', 'find_project',
    'ExpressionEvaluator',
    'History', 'HistoryEntry',
]
