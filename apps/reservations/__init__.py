"""Reservations app package.

Owns the booking ledger and the two-phase hold/confirm/cancel protocol used
to give one vehicle of a model to exactly one concurrent requester. Holds
that are never confirmed are expired by the reaper or lazily on read.
"""
