"""
Client package for the yochat relay.
"""
