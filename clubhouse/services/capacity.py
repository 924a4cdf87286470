"""Capacity checks for the member registry and the waitlist.

Handlers run in a threadpool, so every capacity check and the insert it
guards must happen while holding ``membership_lock``.
"""

from __future__ import annotations

import threading

from sqlmodel import Session

from clubhouse.core.config import get_settings
from clubhouse.core.constants import MemberStatus
from clubhouse.repositories import member_repo, waitlist_repo

membership_lock = threading.RLock()


def has_member_capacity(session: Session) -> bool:
    """Return whether another active member fits under the cap."""

    active_count = member_repo.count_members(session, MemberStatus.ACTIVE)
    return active_count < get_settings().active_members_max


def has_waitlist_capacity(session: Session) -> bool:
    """Return whether another pending entry fits under the cap."""

    return waitlist_repo.count_pending(session) < get_settings().waitlist_max
