"""Exceptions raised by vantage."""


class VantageError(Exception):
    """Base class for all errors raised by vantage itself.

    Errors raised by readers, reducers or trigger callbacks are never wrapped
    in this type. They propagate to the caller of ``Store.get`` unchanged.
    """

    pass


class ConfigurationError(VantageError):
    """Raised when a store or one of its collaborators is misconfigured.

    Configuration errors are fatal: they indicate an integration bug rather
    than a condition that retrying could fix.
    """

    pass


class SnapshotContractError(ConfigurationError):
    """Raised when a snapshot reader returns more than one snapshot.

    Snapshot lookups always request a single record. A reader answering with
    several records is violating its contract and the result is never
    truncated to make it fit.
    """

    def __init__(self, entity_id: object, count: int):
        super().__init__(
            f"Snapshot reader returned {count} snapshots for entity {entity_id!r}, "
            "expected at most 1"
        )
        self.entity_id = entity_id
        self.count = count


class UnknownPositionError(ConfigurationError):
    """Raised when a read position is not one of First, Last, After or Before."""

    def __init__(self, position: object):
        super().__init__(f"Unknown read position: {position!r}")
        self.position = position


class UnknownDecisionError(ConfigurationError):
    """Raised when a trigger callback returns something other than a decision."""

    def __init__(self, decision: object):
        super().__init__(
            f"Trigger returned {decision!r}, expected Emit, EmitAdjusted or Continue"
        )
        self.decision = decision


class StubExhaustedError(VantageError):
    """Raised when a StubReader is read with no stub or prepared return left."""

    pass
