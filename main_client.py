#!/usr/bin/env python3
"""
yochat terminal client - Main Entry Point

Usage:
    python main_client.py [--host HOST] [--port PORT] [--name NAME]
"""

from yochat.client.main_client import main


if __name__ == "__main__":
    main()
