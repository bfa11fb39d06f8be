"""
Services package - Long-lived application state.

Provides:
  - SearchOrchestrator: debounced, generation-stamped background searches
"""

from .orchestrator import Action, Key, KeyEvent, SearchOrchestrator, SearchState

__all__ = ["Action", "Key", "KeyEvent", "SearchOrchestrator", "SearchState"]
