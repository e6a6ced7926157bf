from enum import Enum


class MutationOutcome(str, Enum):
    """
    Result of an optimistic cart mutation on the client.

    APPLIED: Server confirmed, local state reconciled
    NOOP: Nothing changed locally, no request sent
    ROLLED_BACK: Server call failed, previous state restored
    UNAUTHORIZED: Identity rejected, local identity and cart cleared
    SUPERSEDED: A newer mutation was issued before this one resolved, response ignored
    """
    APPLIED = "applied"
    NOOP = "noop"
    ROLLED_BACK = "rolled_back"
    UNAUTHORIZED = "unauthorized"
    SUPERSEDED = "superseded"
