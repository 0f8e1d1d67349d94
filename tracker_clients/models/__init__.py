"""Record models for Aha, GitHub and ZenHub JSON."""

from . import aha
from . import github
from . import zenhub

from .aha import Feature, Product, Release, AhaEvent
from .github import Issue, Repository, Milestone, parse_event
from .zenhub import ZenHubIssue, Workspace, Board, Pipeline

__all__ = [
    'aha',
    'github',
    'zenhub',
    'Feature',
    'Product',
    'Release',
    'AhaEvent',
    'Issue',
    'Repository',
    'Milestone',
    'parse_event',
    'ZenHubIssue',
    'Workspace',
    'Board',
    'Pipeline'
]
