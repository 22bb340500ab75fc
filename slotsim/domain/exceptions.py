# slotsim/domain/exceptions.py


class SlotSimError(Exception):
    """Base class for all slot simulation errors."""
    pass


class ConfigurationError(SlotSimError):
    """Missing or invalid pattern set, payout table, weights or geometry."""
    pass


class RangeError(SlotSimError, IndexError):
    """A grid coordinate falls outside the configured reel/row bounds."""
    def __init__(self, reel: int, row: int, reel_count: int, row_count: int):
        self.reel = reel
        self.row = row
        self.message = (
            f"Grid position (reel={reel}, row={row}) outside "
            f"{reel_count}x{row_count} grid"
        )
        super().__init__(self.message)


class DataIntegrityError(SlotSimError):
    """A persisted report does not survive a serialization round trip."""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"Report failed round-trip check: {path}"
        super().__init__(self.message)


class InsufficientCreditsError(SlotSimError):
    """A live spin was requested without enough credits to cover the bet."""
    def __init__(self, credits, bet):
        self.credits = credits
        self.bet = bet
        self.message = f"Insufficient credits: {credits} < {bet}"
        super().__init__(self.message)
