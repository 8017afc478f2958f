"""
Chat module for server-side messaging functionality.

Handles:
- Connection and name tracking
- Command dispatch
- Chat message broadcasting
"""
