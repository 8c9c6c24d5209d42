import io
from enum import IntEnum
from typing import List, Optional, Sequence, TextIO, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import config

# --- Severity ---

class Severity(IntEnum):
    """Monitoring severities. The value is the process exit code."""
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


# --- Wire Payload Models ---

class Check(BaseModel):
    """Leaf status record with a name and a pass/fail flag."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    success: bool = False
    failure_reason: Optional[str] = Field(default=None, alias="failureReason")

    def ok(self) -> bool:
        return self.success

    def _rows(self) -> List[Tuple[str, str, bool]]:
        return [
            ("Name", self.name, True),
            ("Success", _fmt_bool(self.success), False),
            ("FailureReason", self.failure_reason or "", True),
        ]

    def pp(self, w: TextIO, prefix: str, level: int):
        _write_rows(w, prefix, level, CHECK_LABELS, self._rows())


class Application(BaseModel):
    """
    A named component report. Carries its own pass/fail flag, independent
    of the checks it contains.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    long_name: str = Field(default="", alias="longName")
    short_name: str = Field(default="", alias="shortName")
    component_version: str = Field(default="", alias="componentVersion")
    success: bool = False
    failure_reason: Optional[str] = Field(default=None, alias="failureReason")
    checks: Tuple[Check, ...] = Field(default=(), alias="check")

    def ok(self) -> bool:
        return self.success and all_ok(self.checks)

    def _rows(self) -> List[Tuple[str, str, bool]]:
        return [
            ("LongName", self.long_name, True),
            ("ShortName", self.short_name, True),
            ("ComponentVersion", self.component_version, True),
            ("Success", _fmt_bool(self.success), False),
            ("FailureReason", self.failure_reason or "", True),
        ]

    def pp(self, w: TextIO, prefix: str, level: int):
        _write_rows(w, prefix, level, APPLICATION_LABELS, self._rows())
        _write_children(w, prefix, level, "Check", self.checks)


class CheckResponse(BaseModel):
    """
    Root of a parsed status payload.

    Only minor_version and applications come from the wire; the remaining
    fields describe the run that produced the payload and are filled in by
    the fetch pipeline.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    minor_version: int = Field(default=0, alias="minorVersion")
    applications: Tuple[Application, ...] = Field(default=(), alias="application")

    # Run metadata, never decoded from the payload
    url: str = ""
    response_time: float = 0.0  # seconds
    http_code: int = 0
    body: bytes = b""
    error: Optional[Exception] = None

    def ok(self) -> bool:
        # The root has no status of its own; only its applications count.
        return all_ok(self.applications)

    def _rows(self) -> List[Tuple[str, str, bool]]:
        rows = [
            ("URL", self.url, True),
            ("HTTP code", str(self.http_code), False),
            ("Response time", f"{self.response_time:f}", False),
        ]
        if self.error is not None:
            rows.append(("Error", str(self.error), False))
        rows.append(("MinorVersion", str(self.minor_version), False))
        return rows

    def pp(self, w: TextIO, prefix: str, level: int):
        w.write("===== BEGIN: CheckResponse =====\n")
        _write_rows(w, prefix, level, RESPONSE_LABELS, self._rows())
        _write_children(w, prefix, level, "Application", self.applications)
        w.write("===== END: CheckResponse =======\n")

    def pretty_print(self, w: TextIO):
        self.pp(w, config.INDENT, 0)

    def __str__(self) -> str:
        buf = io.StringIO()
        self.pretty_print(buf)
        return buf.getvalue()


# --- Run Configuration ---

class CheckConfig(BaseModel):
    """
    Everything a single run needs, passed explicitly into the runner.
    The warning and critical limits are not validated against each other.
    """
    # Defaults from the environment arrive as strings and are converted here
    model_config = ConfigDict(validate_default=True)

    url: str
    timeout: float = Field(default=config.DEFAULT_TIMEOUT, gt=0)
    # Per-request HTTP timeout; the run deadline is used when unset
    request_timeout: Optional[float] = Field(default=None, gt=0)
    warning: float = Field(default=config.DEFAULT_WARNING, ge=0)
    critical: float = Field(default=config.DEFAULT_CRITICAL, ge=0)
    verbose: bool = False
    user_agent: str = config.USER_AGENT
    verify_tls: bool = False

    @field_validator("user_agent")
    @classmethod
    def user_agent_must_be_ascii(cls, v):
        # HTTP header values are sent as ASCII
        if not v.isascii():
            raise ValueError("User-Agent must contain ASCII characters only")
        return v

    @property
    def effective_request_timeout(self) -> float:
        return self.request_timeout if self.request_timeout is not None else self.timeout


# --- Run Result Models ---

class Verdict(BaseModel):
    """Severity chosen for a completed response, with its description."""
    severity: Severity
    description: str


class CheckOutcome(BaseModel):
    """What a run prints and how it exits."""
    severity: Severity
    output: str
    # True when the fetch was still in flight at the deadline and left running
    abandoned: bool = False

    @property
    def exit_code(self) -> int:
        return int(self.severity)


# --- Aggregation ---

def all_ok(nodes: Sequence) -> bool:
    """
    True when every node reports ok(). An empty sequence is a failure,
    not a vacuous pass.
    """
    if len(nodes) == 0:
        return False
    for node in nodes:
        if not node.ok():
            return False
    return True


# --- Layout ---

# Labels per node kind; the longest one sets that kind's key column width.
CHECK_LABELS = ("Name", "Success", "FailureReason")
APPLICATION_LABELS = ("LongName", "ShortName", "ComponentVersion", "Success", "FailureReason", "Check")
RESPONSE_LABELS = ("CheckResponse", "URL", "HTTP code", "Response time", "Error", "MinorVersion", "Application")


def _fmt_bool(value: bool) -> str:
    return "true" if value else "false"


def _write_rows(w: TextIO, prefix: str, level: int, labels: Sequence[str], rows):
    """
    Writes "<key> : <value>" lines, keys right-padded to the longest label
    of the node kind, each line indented by prefix repeated level times.
    """
    width = max(len(label) for label in labels)
    indent = prefix * level
    for key, value, suppress_if_empty in rows:
        if suppress_if_empty and value == "":
            continue
        w.write(f"{indent}{key:<{width}} : {value}\n")


def _write_children(w: TextIO, prefix: str, level: int, label: str, children: Sequence):
    total = len(children)
    for i, child in enumerate(children, start=1):
        w.write(f"{prefix * level}{label} (#{i}/{total}) =>\n")
        child.pp(w, prefix, level + 1)
