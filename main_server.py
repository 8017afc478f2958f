#!/usr/bin/env python3
"""
yochat relay server - Main Entry Point

Usage:
    python main_server.py

Optional arguments:
    --host HOST              Bind address (default: 0.0.0.0)
    --port PORT              TCP port (default: 9000)
    --logs-dir DIR           Chat transcript directory (default: logs)
    --log-level LEVEL        Log level (default: INFO)
    --max-line-length N      Longest accepted line in bytes (default: 8192)
"""

from yochat.server.main_server import main


if __name__ == "__main__":
    main()
