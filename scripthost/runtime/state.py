from enum import Enum, auto


class HostState(Enum):
    """
    Host shell lifecycle. Linear; FAILED is only reachable from START.
    """

    START = auto()        # Nothing created yet
    INITIALIZED = auto()  # Context created, libraries installed
    MARSHALLED = auto()   # ``arg`` published
    LOADED = auto()       # Module required (or load failure ignored)
    COMPLETED = auto()    # Entry returned, raised SystemExit, or failed
    TERMINATED = auto()   # Context released

    FAILED = auto()       # Context creation failed
