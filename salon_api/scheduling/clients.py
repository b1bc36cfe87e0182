"""
Client lookup for the appointment form.

Clients are read-only input owned by the client registry. The scheduling
form only needs two things from them: name suggestions while the client
field is typed, and the client whose name exactly matches the entered one.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, computed_field

CLIENT_SUGGESTION_LIMIT = 5


class Client(BaseModel):
    id: str | None = None
    name: str
    phone: str = ''
    vip: bool = False
    visits: int = 0
    last_visit: str | None = Field(default=None, alias='lastVisit')

    class Config:
        populate_by_name = True
        frozen = True

    @computed_field
    @property
    def initials(self) -> str:
        return client_initials(self.name)


def client_initials(name: str) -> str:
    """First letter of the first two words, upper-cased ('ana souza' -> 'AS')."""
    return ''.join(word[0] for word in name.split()[:2]).upper()


def suggest_clients(clients: Iterable[Client], query: str, limit: int = CLIENT_SUGGESTION_LIMIT) -> List[Client]:
    """
    Returns up to ``limit`` clients whose name contains ``query``.

    Matching ignores case; the clients keep their input order. A blank query
    suggests nobody.
    """
    needle = (query or '').strip().casefold()
    if not needle or limit < 1:
        return []

    suggestions: List[Client] = []
    for client in clients:
        if needle in client.name.casefold():
            suggestions.append(client)
            if len(suggestions) == limit:
                break
    return suggestions


def find_client(clients: Iterable[Client], name: str) -> Optional[Client]:
    """The client whose name is exactly ``name`` (after trimming), if any."""
    name = (name or '').strip()
    for client in clients:
        if client.name == name:
            return client
    return None
