"""
Core utilities — exceptions shared across config, statistics, and tools.
"""
