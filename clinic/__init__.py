"""
Clinic operations backend.

This package provides the scheduling side of a small multi-branch clinic:
- Patient intake and history
- Appointment booking against computed availability
- Doctor calendar blockers
- Follow-up tracking with recurrence
- Invoicing of completed consultations
"""
