"""
Core module - configuration, logging, exceptions and session auth.
"""
