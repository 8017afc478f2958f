"""
Shared definitions for client and server.
"""
