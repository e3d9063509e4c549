"""Synchronization engine and freshness reporting."""

from macro_dashboard.sync.synchronizer import Synchronizer
from macro_dashboard.sync.freshness import SyncReport, check_synchronization

__all__ = ["Synchronizer", "SyncReport", "check_synchronization"]
