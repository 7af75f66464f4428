"""
Maintenance Module
Equipment metrics, priority scoring, ranking pipeline and reports
"""
