"""
Scheduling domain: weekly schedules, slot availability, bookings and chat.
"""
