import asyncio
from typing import Awaitable, Callable

from .evaluator import evaluate
from .fetcher import fetch_check_response
from .logger import check_logger
from .models import CheckConfig, CheckOutcome, CheckResponse, Severity
from .reporter import format_report, format_timeout_line

FetchPipeline = Callable[..., Awaitable[CheckResponse]]


async def run_check(check_config: CheckConfig, fetch: FetchPipeline = fetch_check_response) -> CheckOutcome:
    """
    Runs one check: the fetch pipeline races the run deadline.

    If the pipeline delivers a CheckResponse first, it is evaluated and
    reported. If the deadline fires first, an UNKNOWN timeout outcome is
    returned right away and the still-running fetch is left alone; the
    caller is expected to exit the process, which tears it down.
    """
    task = asyncio.create_task(
        fetch(
            check_config.url,
            timeout=check_config.effective_request_timeout,
            user_agent=check_config.user_agent,
            verify_tls=check_config.verify_tls,
        )
    )

    done, _ = await asyncio.wait({task}, timeout=check_config.timeout)
    if task not in done:
        check_logger.warning(
            f"No response from {check_config.url} within {check_config.timeout:.2f} seconds, giving up"
        )
        return CheckOutcome(
            severity=Severity.UNKNOWN,
            output=format_timeout_line(check_config.timeout, check_config.url),
            abandoned=True,
        )

    response = task.result()
    verdict = evaluate(response, check_config.warning, check_config.critical)
    output = format_report(
        verdict,
        response,
        check_config.warning,
        check_config.critical,
        verbose=check_config.verbose,
    )
    return CheckOutcome(severity=verdict.severity, output=output)
