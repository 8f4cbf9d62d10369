"""ShelfCure store management backend.

Organized by feature modules (users, stores, subscriptions, staff, attendance,
payroll) with a thin Flask controller layer over service/repository layers.
"""
