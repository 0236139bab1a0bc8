"""
keyrelay: Anthropic completion proxy with upstream credential rotation
"""

__version__ = "0.1.0"
