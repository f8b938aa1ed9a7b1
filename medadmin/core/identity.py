from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated actor behind a request.

    ``None`` is used in place of a ``CurrentUser`` when nobody is signed in.
    """

    id: str
    email: str = ""
    role: str = "USER"
    permissions: FrozenSet[str] = field(default_factory=frozenset)
