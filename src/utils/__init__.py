"""
Utility Module
Logging and value/date helpers shared across the system
"""
