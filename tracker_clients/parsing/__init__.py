"""Text parsers for data embedded in tracker payloads."""

from .issue_data import IssueData

__all__ = [
    'IssueData'
]
