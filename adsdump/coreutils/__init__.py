"""
Core utilities shared by every layer: configuration, environment access,
logging setup, error taxonomy and the authenticated request executor.
"""
