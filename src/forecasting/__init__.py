"""
Forecasting Module
Next-failure forecast from closure intervals
"""
