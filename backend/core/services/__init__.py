"""
Services Layer

Business logic for recording a round shot by shot.
These services orchestrate the domain models; RoundSession is
the entry point the screen flow uses.
"""

from .shot_ledger import ShotLedger
from .navigator import Navigator, EntryCursor
from .round_session import RoundSession
from .submission import SubmissionClient, SubmissionResult

__all__ = [
    "ShotLedger",
    "Navigator",
    "EntryCursor",
    "RoundSession",
    "SubmissionClient",
    "SubmissionResult",
]
