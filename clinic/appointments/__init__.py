"""
Appointments module.

Covers the service catalogue, appointment booking and status changes,
and the availability engine that computes bookable slots for a day.
"""
