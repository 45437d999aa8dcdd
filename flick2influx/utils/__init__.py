"""
Utility helpers for flick2influx.
"""
