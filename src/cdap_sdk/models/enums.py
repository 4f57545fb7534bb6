from enum import Enum


class ErrorCode(str, Enum):
    IO = "IO"
    DECODE = "DECODE"
    TRANSPORT = "TRANSPORT"
    TIMEOUT = "TIMEOUT"
    REMOTE = "REMOTE"


class ResourceState(str, Enum):
    """Lifecycle state of a declared artifact, as seen by the declaring side"""

    ABSENT = "absent"
    PENDING = "pending"  # declared, upload not confirmed
    PRESENT = "present"


class PlanAction(str, Enum):
    CREATE = "create"
    REPLACE = "replace"
    DELETE = "delete"
    NOOP = "noop"
