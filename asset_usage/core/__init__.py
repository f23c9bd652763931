"""
Core modules for asset usage statistics.

This package contains the statistics cache, summary notes, variant usage
tabulation and report composition.
"""
