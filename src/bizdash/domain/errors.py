"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Payload failed a field constraint before reaching the gateway."""


class InvalidAmount(ValidationError):
    """Monetary input cannot be represented as integer minor units."""


class NotFoundError(DomainError):
    """Targeted record is absent from the current snapshot."""


class RemoteError(DomainError):
    """Sync gateway rejected the request or could not be reached."""


def record_not_found(collection: str, record_id: int) -> str:
    """Return message for a record missing from a snapshot."""
    return f"No record {record_id} in {collection}"


def missing_owner() -> str:
    """Return message when no owner identifier is available."""
    return "No owner account is set; sign in or pass --owner first"


def owner_mismatch(collection: str, expected: str, actual: str) -> str:
    """Return message for a record that belongs to another owner."""
    return (
        f"{collection} holds records of owner '{expected}', "
        f"refusing to mix in records of owner '{actual}'"
    )


def invalid_amount(value: object, reason: str) -> str:
    """Return message for a rejected monetary value."""
    return f"Invalid amount {value!r}: {reason}"


def malformed_record(collection: str, field: str, record: dict) -> str:
    """Return message for a gateway response missing a usable field."""
    record_id = record.get("id", "?")
    return f"Malformed {collection} record {record_id}: bad or missing '{field}'"
