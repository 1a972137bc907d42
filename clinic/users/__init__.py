"""
Staff and branch module.

Branches are the clinic locations that scope appointment and follow-up
queries; users are the staff (admin, doctor, receptionist) acting on them.
"""
