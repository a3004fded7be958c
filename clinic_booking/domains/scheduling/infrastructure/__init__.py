"""
Scheduling Infrastructure Layer
"""
