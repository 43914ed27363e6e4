# -*- coding: utf-8 -*-
"""
Capacity Guard: decides whether one more participant fits in an event.
"""


def can_register(event, active_registration_count):
    # max_participants == 0 means unlimited
    if not event.max_participants:
        return True
    return active_registration_count < event.max_participants

