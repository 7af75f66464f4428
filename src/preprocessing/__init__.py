"""
Preprocessing Module
Record sanitization and population normalization
"""
