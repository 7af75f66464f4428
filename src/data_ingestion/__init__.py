"""
Data Ingestion Module
Loading of work order exports into logical order sources
"""
