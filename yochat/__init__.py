"""
yochat - a line-based multi-user chat relay.

This package contains:
- server: connection registry, chat protocol engine and TCP listener
- client: terminal client
- common: constants and wire-level message text shared by both
"""
