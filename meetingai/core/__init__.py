"""
Core module - configuration, models, exceptions and shared helpers.
"""
