"""
Lifecycle states derived for tracked entities.
"""

from enum import IntEnum


class EntityState(IntEnum):
    #: Scheduled for insert or update and owned by the unit of work.
    MANAGED = 1
    #: Not scheduled and unknown to the store.
    NEW = 2
    #: Not scheduled, but carries an identity the store already knows.
    DETACHED = 3
    #: Scheduled for deletion on the next commit.
    DELETED = 4
