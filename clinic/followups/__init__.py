"""
Follow-ups module.

Follow-ups are dated contact tasks (calls, check-ins) created at intake or
regenerated from a recurrence rule when a recurring task is completed.
"""
