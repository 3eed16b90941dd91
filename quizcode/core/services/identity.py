"""Identity collaborator used to name participants and gate session start."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class IdentityProvider(Protocol):
    def get_current_identity(self) -> str | None: ...

    def get_client_token(self) -> str | None:
        """Opaque token of the client holding the identity, if any."""
        ...


@dataclass(frozen=True, slots=True)
class StaticIdentity:
    """Identity fixed for the lifetime of a request or a console session."""

    display_name: str | None = None
    client_token: str | None = None

    def get_current_identity(self) -> str | None:
        if self.display_name is None:
            return None
        return self.display_name.strip() or None

    def get_client_token(self) -> str | None:
        return self.client_token
