"""
Equipment Maintenance Prioritization System
Ranks equipment for maintenance from historical work order records
"""
