"""Change acquisition and commit detection."""

from .acquirer import ChangeAcquirer
from .debounce import Debouncer
from .watcher import CommitWatcher, WatcherState

__all__ = ["ChangeAcquirer", "CommitWatcher", "Debouncer", "WatcherState"]
