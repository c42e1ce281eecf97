"""
Forum Tools - Core Utilities
Logging and error types shared by every package.
"""
