import json
import logging
from typing import Optional

from sitecheck.domain import CrawlStatistics


def _ms(seconds: float) -> int:
    return int(seconds * 1000)


def summary_dict(stats: CrawlStatistics) -> dict:
    return {
        "total": {"crawled": stats.total},
        "status": {
            "status-codes": {str(code): count for code, count in sorted(stats.status_codes.items())},
            "errors": [
                {
                    "url": r.url,
                    "status-code": r.status_code,
                    "server-time": _ms(r.time),
                    "linking-urls": list(r.linking_urls),
                }
                for r in stats.non_200_urls
            ],
        },
        "response-time": {
            "avg-time-ms": _ms(stats.average_200_time),
            "max-time-ms": _ms(stats.max_200_time),
        },
    }


def json_summary(stats: CrawlStatistics) -> str:
    """Machine-readable summary, one JSON document."""
    return json.dumps(summary_dict(stats))


def render_summary(stats: CrawlStatistics, log: Optional[logging.Logger] = None) -> None:
    """Log a human-readable summary at INFO level."""
    log = log or logging.getLogger(__name__)
    log.info("-------- Summary -------")
    log.info("general:")
    log.info("    crawled: %d", stats.total)
    log.info("")
    log.info("status:")
    for code, count in sorted(stats.status_codes.items()):
        log.info("    status-%d: %d", code, count)

    log.info("")
    log.info("status-errors-detail:")
    if not stats.non_200_urls:
        log.info("    - none")
    for result in stats.non_200_urls:
        log.info("    - %s:", result.url)
        log.info("        status-code: %d", result.status_code)
        for linking_url in result.linking_urls:
            log.info("        linking-url: %s", linking_url)

    log.info("")
    log.info("server-time:")
    log.info("    avg-time: %dms", _ms(stats.average_200_time))
    log.info("    max-time: %dms", _ms(stats.max_200_time))
    log.info("------------------------")
