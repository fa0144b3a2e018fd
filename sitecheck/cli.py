import argparse
import logging
import signal
import sys
import threading
from contextlib import contextmanager
from typing import List, Optional

from sitecheck import config as env
from sitecheck.container import Container
from sitecheck.domain import CrawlConfiguration, CrawlStatistics
from sitecheck.exceptions import HookExecutionError, SitemapFetchError
from sitecheck.services.cancellation import CancellationToken
from sitecheck.services.report_renderer import json_summary, render_summary
from sitecheck.utils.logging_utils import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitecheck",
        description="a basic sitemap.xml crawler",
        usage="%(prog)s [global options] sitemap-url",
    )
    parser.add_argument("sitemap_url", metavar="sitemap-url", help="URL of the sitemap.xml to crawl")
    parser.add_argument("--config", help="YAML profile providing defaults for these options")

    crawl = parser.add_argument_group("crawling")
    crawl.add_argument("--crawl-hyperlinks", action="store_true", help="follow and test hyperlinks ('a' tags href)")
    crawl.add_argument("--crawl-images", action="store_true", help="follow and test image links ('img' tags src)")
    crawl.add_argument(
        "--crawl-external",
        action="store_true",
        help="follow and test external links. Use in combination with --crawl-hyperlinks and/or --crawl-images",
    )
    crawl.add_argument("-f", "--forever", action="store_true", help="crawl the sitemap's URLs forever... or until stopped")
    crawl.add_argument("-i", "--iterations", type=int, default=1, help="number of crawling iterations for the whole sitemap")
    crawl.add_argument(
        "-w",
        "--wait-interval",
        type=int,
        default=env.CRAWL_WAIT_INTERVAL,
        help="wait interval in seconds between sitemap crawling iterations [$CRAWL_WAIT_INTERVAL]",
    )
    crawl.add_argument(
        "-t", "--throttle", type=int, default=env.CRAWL_THROTTLE, help="number of http requests to do at once [$CRAWL_THROTTLE]"
    )
    crawl.add_argument(
        "-y", "--timeout", type=int, default=env.CRAWL_TIMEOUT_MS, help="timeout duration for requests, in milliseconds [$CRAWL_TIMEOUT]"
    )
    crawl.add_argument(
        "--override-host", default=env.CRAWL_HOST, help="override the hostname used in sitemap urls [$CRAWL_HOST]"
    )
    crawl.add_argument("-u", "--user", default=env.CRAWL_HTTP_USER, help="username for http basic authentication [$CRAWL_HTTP_USER]")
    crawl.add_argument(
        "-p",
        "--pass",
        dest="password",
        default=env.CRAWL_HTTP_PASSWORD,
        help="password for http basic authentication [$CRAWL_HTTP_PASSWORD]",
    )

    output = parser.add_argument_group("output")
    output.add_argument("-q", "--quiet", "--silent", action="store_true", help="suppress all normal output")
    output.add_argument("-j", "--json", action="store_true", help="output using JSON format")
    output.add_argument("--summary-only", action="store_true", help="print only the summary")
    output.add_argument("--debug", action="store_true", help="run in debug mode")

    errors = parser.add_argument_group("exit codes")
    errors.add_argument("-e", "--non-200-error", type=int, default=1, help="error code to use if any non-200 response is encountered")
    errors.add_argument(
        "-l", "--response-time-error", type=int, default=1, help="error code to use if the maximum response time is overrun"
    )
    errors.add_argument(
        "-m",
        "--response-time-max",
        type=int,
        default=0,
        help="maximum response time of URLs, in milliseconds, before considered an error",
    )

    hooks = parser.add_argument_group("hooks")
    hooks.add_argument("--pre-cmd", help="command(s) to run before starting crawler")
    hooks.add_argument("--post-cmd", help="command(s) to run after crawler finishes")

    parser.add_argument("--version", action="version", version=f"%(prog)s {env.VERSION}")
    return parser


def parse_args(argv: Optional[List[str]], container: Container) -> argparse.Namespace:
    parser = build_parser()
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config")
    known, _ = pre.parse_known_args(argv)
    if known.config:
        defaults = container.profile_parser().load(known.config)
        if defaults is None:
            parser.error(f"could not load profile {known.config}")
        parser.set_defaults(**defaults)
    return parser.parse_args(argv)


def log_level_for(args: argparse.Namespace) -> int:
    if args.debug:
        return logging.DEBUG
    if args.quiet or args.summary_only:
        return logging.CRITICAL
    return logging.INFO


@contextmanager
def interrupt_handlers(stop_event: CancellationToken):
    """Turn SIGINT/SIGTERM into a cancellation request while the crawl runs."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum, frame):
        stop_event.cancel(f"received {signal.Signals(signum).name}")

    previous = {sig: signal.signal(sig, handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)


def crawl_configuration(args: argparse.Namespace) -> CrawlConfiguration:
    return CrawlConfiguration.create(
        throttle=args.throttle,
        host=args.override_host,
        user=args.user,
        password=args.password,
        timeout_ms=args.timeout,
        crawl_hyperlinks=args.crawl_hyperlinks,
        crawl_images=args.crawl_images,
        crawl_external=args.crawl_external,
    )


def exit_code_for(stats: CrawlStatistics, args: argparse.Namespace, log: logging.Logger) -> int:
    if not stats.all_ok:
        return args.non_200_error

    max_response_time = args.response_time_max
    if max_response_time > 0 and int(stats.max_200_time * 1000) > max_response_time:
        log.warning("Max response time (%dms) was exceeded", max_response_time)
        return args.response_time_error
    return 0


def start(args: argparse.Namespace, container: Container, log: logging.Logger, stop_event: CancellationToken) -> int:
    """Crawl the sitemap and report; raises SitemapFetchError if the sitemap cannot be read."""
    container.config.CRAWL_THROTTLE.from_value(max(1, args.throttle))
    container.config.CRAWL_TIMEOUT.from_value(args.timeout)

    log.info("Crawling %s", args.sitemap_url)
    urls = container.sitemap_service().get_urls(args.sitemap_url)
    log.info("Found %d URL(s)", len(urls))

    iterations = None if args.forever else args.iterations
    with interrupt_handlers(stop_event):
        stats = container.iteration_controller().run(
            urls,
            crawl_configuration(args),
            max_iterations=iterations,
            wait_interval=args.wait_interval,
            stop_event=stop_event,
        )

    if not args.quiet:
        if args.json:
            sys.stdout.write(json_summary(stats) + "\n")
        else:
            if args.summary_only:
                log.setLevel(logging.INFO)
            render_summary(stats, log)
            if args.summary_only:
                log.setLevel(logging.CRITICAL)

    return exit_code_for(stats, args, log)


def main(argv: Optional[List[str]] = None, container: Optional[Container] = None) -> int:
    container = container or Container()
    args = parse_args(argv, container)
    log = configure_logging(log_level_for(args), json_output=args.json)

    if args.pre_cmd:
        try:
            container.hook_runner().run(args.pre_cmd)
        except HookExecutionError as e:
            log.critical("Failed to execute pre-execution command: %s", e)
            return 1

    try:
        exit_code = start(args, container, log, CancellationToken())
    except SitemapFetchError as e:
        # fatal: the post-execution command is not run
        log.critical("%s", e)
        return 1

    if args.post_cmd:
        try:
            container.hook_runner().run(args.post_cmd)
        except HookExecutionError as e:
            log.critical("Failed to execute post-execution command: %s", e)
            return 1

    return exit_code


def run() -> None:
    sys.exit(main())
