"""
Booking domain

Booking lifecycle: creation, status transitions, partner assignment, reviews,
outfit exchange, secure chat and meeting adjustments.
"""
