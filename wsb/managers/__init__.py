"""
Managers for the WSB tracker.

This package contains focused manager classes that handle specific aspects of WSB functionality:
- WsbEngine: Structural operations, aggregate propagation and status cascading
- EvmTracker: Earned value management figures
- StorageManager: Persistence to the .wsb/ folder
"""

from wsb.managers.wsb_engine import WsbEngine
from wsb.managers.evm_tracker import EvmSummary, EvmTracker
from wsb.managers.storage_manager import StorageManager
from wsb.exceptions import StorageError

__all__ = [
    "WsbEngine",
    "EvmSummary",
    "EvmTracker",
    "StorageManager",
    "StorageError",
]
