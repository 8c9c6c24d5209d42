import httpx

from .logger import check_logger
from .models import CheckResponse, Severity, Verdict
from .reporter import quote


def evaluate(response: CheckResponse, warning: float, critical: float) -> Verdict:
    """
    Classifies a completed response. The first matching rule wins:

    1. CRITICAL when a transport or decode error occurred.
    2. UNKNOWN when the HTTP status is not 200.
    3. CRITICAL when the payload does not aggregate to ok.
    4. CRITICAL when the response time is at or above the critical limit.
    5. WARNING when the response time is at or above the warning limit.
    6. OK otherwise.

    The limits are not checked against each other; with warning above
    critical the critical rule still applies first.
    """
    if response.error is not None:
        verdict = Verdict(severity=Severity.CRITICAL, description=quote(str(response.error)))
    elif response.http_code != httpx.codes.OK:
        verdict = Verdict(severity=Severity.UNKNOWN, description=f"HTTP problem, code: {response.http_code}")
    elif not response.ok():
        verdict = Verdict(severity=Severity.CRITICAL, description="Response tagged as failed, see long output")
    elif response.response_time >= critical:
        verdict = Verdict(severity=Severity.CRITICAL, description="Response time at or above critical limit")
    elif response.response_time >= warning:
        verdict = Verdict(severity=Severity.WARNING, description="Response time at or above warning limit")
    else:
        verdict = Verdict(severity=Severity.OK, description="All good")

    check_logger.debug({
        "message": "Evaluated response",
        "severity": verdict.severity.name,
        "http_code": response.http_code,
        "response_time": response.response_time,
        "warning": warning,
        "critical": critical,
    })
    return verdict
