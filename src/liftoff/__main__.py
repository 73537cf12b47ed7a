"""CLI entrypoint for running deployment actions against a Heroku app."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import structlog

from liftoff.core.config import Settings
from liftoff.core.exceptions import LiftoffError
from liftoff.utils.logging import bind_app_context, setup_logging
from liftoff.wrapper import HerokuWrapper

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="liftoff", description="Heroku deployment actions")
    parser.add_argument("--app", required=True, help="Heroku app name")
    parser.add_argument("--api-key", default=None, help="API key (defaults to HEROKU_API_KEY or ~/.netrc)")
    parser.add_argument("--log-level", default=None, help="Log level (default from LIFTOFF_LOG_LEVEL)")
    parser.add_argument("--log-format", choices=["json", "console"], default=None)
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("restart", help="Restart all dynos")

    cmd_maint = sub.add_parser("maintenance", help="Toggle maintenance mode")
    cmd_maint.add_argument("state", choices=["on", "off"])

    sub.add_parser("migrate", help="Run rake db:migrate and wait for it")

    cmd_run = sub.add_parser("run", help="Start a one-off task")
    cmd_run.add_argument("task", help="Command to run, e.g. 'rake cache:clear'")

    sub.add_parser("url", help="Print the app URL")
    sub.add_parser("last-commit", help="Print the commit of the latest release")
    return parser


def run_command(wrapper: HerokuWrapper, args: argparse.Namespace) -> None:
    if args.cmd == "restart":
        wrapper.app_restart()
    elif args.cmd == "maintenance":
        if args.state == "on":
            wrapper.app_maintenance_on()
        else:
            wrapper.app_maintenance_off()
    elif args.cmd == "migrate":
        wrapper.run_migrations()
    elif args.cmd == "run":
        process = wrapper.run_task(args.task)
        if process.process:
            logger.info("Task started", process=process.process)
    elif args.cmd == "url":
        print(wrapper.app_url())
    elif args.cmd == "last-commit":
        commit = wrapper.last_deploy_commit()
        if commit:
            print(commit)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    setup_logging(args.log_level or settings.log_level, args.log_format or settings.log_format)
    bind_app_context(args.app, args.cmd)

    try:
        with HerokuWrapper(args.app, api_key=args.api_key, settings=settings) as wrapper:
            run_command(wrapper, args)
    except LiftoffError as e:
        logger.error("Command failed", error=str(e), code=e.code)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
