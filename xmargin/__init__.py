"""
Cross-margin settlement engine and reference host
"""

__version__ = "0.1.0"
