"""
promptvault - keep prompts in folders with automatic version history.
"""

__version__ = "0.1.0"
