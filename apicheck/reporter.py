import json

from .models import CheckResponse, Severity, Verdict


def quote(text: str) -> str:
    """Double-quoted, backslash-escaped rendering of text."""
    return json.dumps(text, ensure_ascii=False)


def format_status_line(verdict: Verdict, response: CheckResponse, warning: float, critical: float) -> str:
    """
    The one-line status message with its performance-data suffix, e.g.::

        OK: All good; Response time: 0.120000; URL: "http://host/status"|time=0.120000s;10.000000;15.000000
    """
    seconds = response.response_time
    perfdata = f"|time={seconds:f}s;{warning:f};{critical:f}"
    return (
        f"{verdict.severity.name}: {verdict.description}; "
        f"Response time: {seconds:f}; URL: {quote(response.url)}{perfdata}\n"
    )


def format_report(verdict: Verdict, response: CheckResponse, warning: float, critical: float, verbose: bool = False) -> str:
    """Status line, followed by the full tree dump when verbose."""
    output = format_status_line(verdict, response, warning, critical)
    if verbose:
        output += str(response)
    return output


def format_timeout_line(timeout: float, url: str) -> str:
    return f"{Severity.UNKNOWN.name}: Timed out after {timeout:.2f} seconds getting {quote(url)}\n"


def format_internal_error_line(error: Exception) -> str:
    return f"{Severity.UNKNOWN.name}: Internal error: {quote(str(error))}\n"


def format_usage_error_line(message: str) -> str:
    return f"{Severity.UNKNOWN.name}: Invalid arguments: {quote(message)}\n"
