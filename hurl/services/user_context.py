"""
Per-session hurl history.

A UserContext is loaded from the caller's cookie session, passed
explicitly through the hurl service, and written back by the route.
"""

from dataclasses import dataclass, field
from typing import Any, MutableMapping, Optional


SESSION_KEY = "hurls"


@dataclass
class UserContext:
    """The hurl ids made in one browser session, oldest first."""
    hurls: list[str] = field(default_factory=list)

    @classmethod
    def from_session(cls, session: MutableMapping[str, Any]) -> "UserContext":
        return cls(hurls=[str(id) for id in session.get(SESSION_KEY, [])])

    def to_session(self, session: MutableMapping[str, Any]) -> None:
        session[SESSION_KEY] = list(self.hurls)

    def add_hurl(self, id: str) -> None:
        """Append ``id``; re-running an existing hurl moves it to the end."""
        if id in self.hurls:
            self.hurls.remove(id)
        self.hurls.append(id)

    def remove_hurl(self, id: str) -> None:
        if id in self.hurls:
            self.hurls.remove(id)

    @property
    def second_to_last_hurl_id(self) -> Optional[str]:
        return self.hurls[-2] if len(self.hurls) > 1 else None
