"""
Scripts Package
Command line entry points
"""
