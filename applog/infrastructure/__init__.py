"""Infrastructure Package

Logging engine, record builders and formatters.
"""
