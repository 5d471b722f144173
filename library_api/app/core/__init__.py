"""
Core infrastructure: settings, logging, errors, database access and
the optional query cache.
"""
