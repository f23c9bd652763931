"""
Asset usage statistics for cloud asset delivery.

Aggregates object storage, image and video stream usage into display-ready
notes and variant usage tables.
"""

__version__ = "0.1.0"
