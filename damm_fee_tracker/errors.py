"""Typed errors raised while fetching, decoding and pricing fee accounts."""


class FeeTrackerError(Exception):
    """Base class for fee tracker errors."""


class ConfigError(FeeTrackerError):
    """Raised when the configuration or an address in it is invalid."""


class SchemaError(FeeTrackerError):
    """Raised when the IDL cannot be turned into account layouts."""


class AccountNotFound(FeeTrackerError):
    """Raised when an account does not exist on-chain."""

    def __init__(self, address):
        self.address = address
        super().__init__(f"Account not found on-chain: {address}")


class OwnershipMismatch(FeeTrackerError):
    """Raised when an account is not owned by the expected program."""

    def __init__(self, address, expected, observed):
        self.address = address
        self.expected = expected
        self.observed = observed
        super().__init__(
            f"Account {address} not owned by program {expected} (owner={observed})"
        )


class UnknownAccountType(FeeTrackerError):
    """Raised when no IDL account discriminator matches the account data."""

    def __init__(self, address, tag):
        self.address = address
        self.tag = tag
        super().__init__(
            f"No IDL account discriminator match for {address} (tag={tag.hex()})"
        )


class MalformedAccountData(FeeTrackerError):
    """Raised when account data is shorter than its layout requires."""

    def __init__(self, address, detail):
        self.address = address
        self.detail = detail
        super().__init__(f"Malformed data for account {address}: {detail}")


class UnresolvedRoles(FeeTrackerError):
    """Raised when two decoded accounts do not form a pool/position pair."""
