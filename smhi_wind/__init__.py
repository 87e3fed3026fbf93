"""
SMHI wind display for smart-mirror dashboards
"""

__version__ = "2.5.0"
