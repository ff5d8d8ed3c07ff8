"""
Recycling-Wise scan history and impact tracking

Keeps a bounded history of classified waste items, derives the waste
diverted from landfill and tracks how often the classifications were right.
"""

__version__ = "1.0.0"
__author__ = "Recycling-Wise Project"
