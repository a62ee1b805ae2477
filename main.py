"""
main.py — Command-line entry point for the Job Apply pipeline.

    python main.py apply --request request.yaml
    python main.py history --owner me@example.com
    python main.py track --owner me@example.com --title "Backend Engineer" --url https://...
    python main.py apply --request a.yaml --request b.yaml --warm-cache
"""

import argparse
import dataclasses
import json
import logging
import sys
from datetime import datetime

import yaml

from config import validate_config
from models import ApplicationRequest
from monitoring import setup_logging, get_logger
from service import ApplicationService


def load_request(path: str) -> ApplicationRequest:
    """Load an ApplicationRequest from a YAML or JSON file ('-' reads stdin)."""
    if path == "-":
        data = yaml.safe_load(sys.stdin)
    else:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    return ApplicationRequest.from_dict(data or {})


def _print_json(payload):
    print(json.dumps(payload, indent=2, default=str))


def cmd_apply(args) -> int:
    logger = get_logger("main")
    logger.info("=" * 60)
    logger.info("JOB APPLY PIPELINE — Starting run")
    logger.info(f"Timestamp: {datetime.now().isoformat()}")
    logger.info("=" * 60)

    for warning in validate_config():
        logger.warning(f"Config: {warning}")

    requests = []
    for path in args.request:
        try:
            request = load_request(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Invalid application request {path}: {e}")
            return 2
        if args.owner:
            request = dataclasses.replace(request, requester_identity=args.owner)
        requests.append(request)

    service = ApplicationService.from_config(warm_cache=args.warm_cache)
    service.record_history = not args.no_history
    if service.warmup_thread is not None:
        logger.info("Waiting for cache warm-up to finish...")
        service.warmup_thread.join()

    results = [service.submit_application_run(r).to_dict() for r in requests]
    _print_json(results[0] if len(results) == 1 else results)
    return 0


def cmd_history(args) -> int:
    service = ApplicationService.from_config()
    records = service.list_history(args.owner, newest_first=not args.oldest_first)
    _print_json([r.to_dict() for r in records])
    return 0


def cmd_track(args) -> int:
    service = ApplicationService.from_config()
    try:
        record = service.track_application(args.owner, args.title, args.url, args.company, args.status)
    except ValueError as e:
        get_logger("main").error(str(e))
        return 2
    _print_json(record.to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="job-apply", description="Scan a job board and apply to matching postings.")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    apply_p = sub.add_parser("apply", help="run the application pipeline for one request")
    apply_p.add_argument(
        "--request", required=True, action="append",
        help="YAML/JSON request file, or '-' for stdin (repeatable; runs share one page cache)",
    )
    apply_p.add_argument("--owner", help="override the requester identity")
    apply_p.add_argument("--no-history", action="store_true", help="do not record the runs")
    apply_p.add_argument("--warm-cache", action="store_true", help="pre-fetch the popular boards from preferences.yaml first")
    apply_p.set_defaults(func=cmd_apply)

    history_p = sub.add_parser("history", help="list application history for a user")
    history_p.add_argument("--owner", required=True)
    history_p.add_argument("--oldest-first", action="store_true")
    history_p.set_defaults(func=cmd_history)

    track_p = sub.add_parser("track", help="record an application made by hand")
    track_p.add_argument("--owner", required=True)
    track_p.add_argument("--title", required=True)
    track_p.add_argument("--url", required=True)
    track_p.add_argument("--company")
    track_p.add_argument("--status", default="applied")
    track_p.set_defaults(func=cmd_track)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
