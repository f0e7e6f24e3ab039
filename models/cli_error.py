from dataclasses import asdict, dataclass
from typing import Any, Literal

ErrorCode = Literal["AUTH_REQUIRED", "AUTH_INVALID", "RATE_LIMITED", "NETWORK_ERROR", "UNKNOWN"]

ERROR_CODES = ("AUTH_REQUIRED", "AUTH_INVALID", "RATE_LIMITED", "NETWORK_ERROR", "UNKNOWN")


@dataclass(frozen=True)
class CLIError:
    code: ErrorCode
    message: str
    recoverable: bool = False
    suggestion: str | None = None

    def __post_init__(self):
        if self.code not in ERROR_CODES:
            object.__setattr__(self, "code", "UNKNOWN")

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if not data["suggestion"]:
            data.pop("suggestion")
        return data
