from enum import Enum


class ClassStatus(str, Enum):
    """
    Approval lifecycle of a yoga class.

    Any status may be set to any other by an admin; a reason is expected
    alongside non-active statuses but is stored as given.
    """
    PENDING = "Pending"  # Created by an instructor, awaiting review (initial state)
    ACTIVE = "Active"  # Approved, listed publicly and purchasable
    REJECTED = "Rejected"  # Declined by an admin, see reason
