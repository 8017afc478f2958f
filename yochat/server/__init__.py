"""
Server package for the yochat relay.

This package contains all server-side functionality including:
- Client connection management
- Name registration and command dispatch
- Chat message broadcasting
- Configuration and utilities
"""
