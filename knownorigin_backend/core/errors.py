from __future__ import annotations


class PreconditionError(Exception):
    """Raised when an operation needs a connected wallet and none was given."""


class UnrecognizedShapeError(TypeError):
    """Raised when a fragment is neither a token nor an edition."""

    def __init__(self, fragment: object) -> None:
        super().__init__(f"Unrecognized fragment shape: {type(fragment).__name__}")
        self.fragment = fragment


class CollaboratorFailure(Exception):
    """Base class for failures reported by an external collaborator."""


class SourceQueryError(CollaboratorFailure):
    """The subgraph answered with GraphQL errors."""

    def __init__(self, errors: list[dict | str]) -> None:
        messages = ", ".join(
            str(error.get("message", error) if isinstance(error, dict) else error) for error in errors
        )
        super().__init__(f"Subgraph query failed: {messages}")
        self.errors = errors


class FragmentNotFoundError(CollaboratorFailure):
    def __init__(self, asset_type: str, token_id: str) -> None:
        super().__init__(f"No {asset_type} found with id {token_id}")
        self.asset_type = asset_type
        self.token_id = token_id


class ContractNotFoundError(CollaboratorFailure):
    def __init__(self, name: str) -> None:
        super().__init__(f"No address configured for contract {name}")
        self.name = name


class RateUnavailableError(CollaboratorFailure):
    """The rates API did not return a usable price."""


__all__ = [
    "CollaboratorFailure",
    "ContractNotFoundError",
    "FragmentNotFoundError",
    "PreconditionError",
    "RateUnavailableError",
    "SourceQueryError",
    "UnrecognizedShapeError",
]
