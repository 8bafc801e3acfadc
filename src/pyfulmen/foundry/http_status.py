"""HTTP status code groups."""

from dataclasses import dataclass, field
from typing import Optional

INFORMATIONAL = "informational"
SUCCESS = "success"
REDIRECT = "redirect"
CLIENT_ERROR = "client-error"
SERVER_ERROR = "server-error"


@dataclass(frozen=True)
class HTTPStatusCode:
    value: int
    reason: str


@dataclass
class HTTPStatusGroup:
    """A status class (2xx, 4xx...) and the codes the catalog knows in it."""

    id: str
    name: str
    description: str = ""
    codes: list[HTTPStatusCode] = field(default_factory=list)

    def contains(self, code: int) -> bool:
        return any(status.value == code for status in self.codes)

    def reason(self, code: int) -> Optional[str]:
        for status in self.codes:
            if status.value == code:
                return status.reason
        return None


class HTTPStatusHelper:
    """Classify status codes against a fixed set of status groups."""

    def __init__(self, groups: list[HTTPStatusGroup]):
        self._groups = {group.id: group for group in groups}
        self._by_code = {status.value: group for group in groups for status in group.codes}

    def _in_group(self, code: int, group_id: str) -> bool:
        group = self._groups.get(group_id)
        return group is not None and group.contains(code)

    def is_informational(self, code: int) -> bool:
        return self._in_group(code, INFORMATIONAL)

    def is_success(self, code: int) -> bool:
        return self._in_group(code, SUCCESS)

    def is_redirect(self, code: int) -> bool:
        return self._in_group(code, REDIRECT)

    def is_client_error(self, code: int) -> bool:
        return self._in_group(code, CLIENT_ERROR)

    def is_server_error(self, code: int) -> bool:
        return self._in_group(code, SERVER_ERROR)

    def reason_phrase(self, code: int) -> Optional[str]:
        group = self._by_code.get(code)
        return group.reason(code) if group else None

    def group(self, code: int) -> Optional[HTTPStatusGroup]:
        return self._by_code.get(code)
