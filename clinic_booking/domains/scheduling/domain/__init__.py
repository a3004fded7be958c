"""
Scheduling Domain Layer

Entities, value objects, events and services for clinic scheduling.
"""
