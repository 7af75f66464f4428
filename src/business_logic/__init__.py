"""
Business Logic Module
Justification rules for ranked equipment
"""
