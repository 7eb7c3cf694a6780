"""
Slack Secret Santa — orchestrator.
Flow: load config → open Slack session → (on ready) pair → DM each giver → close.
"""

import sys
import random
import logging
import argparse
from functools import partial
from pathlib import Path

from sources.config_reader import DEFAULT_CONFIG_PATH, load_config
from pairing.assigner import assign_pairings, verify_pairings
from delivery.notifier import run_exchange
from delivery.slack_session import SlackSession

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def configure_logging():
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def add_log_file(log_file):
    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Draw Secret Santa pairings and DM them over Slack.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH,
                        help="YAML/JSON file with token and users")
    parser.add_argument("--dry-run", action="store_true",
                        help="Log the pairings instead of sending them")
    return parser.parse_args(argv)


def dry_run(config):
    pairings = assign_pairings(config.users, rng=random.Random(config.seed))
    verify_pairings(pairings, config.users)
    for p in pairings:
        log.info(f"{p.giver} -> {p.receiver}")
    return pairings


def main(argv=None, session_factory=SlackSession):
    args = parse_args(argv)
    configure_logging()
    log.info("=== Secret Santa starting ===")
    try:
        config = load_config(args.config)
        if config.log_file:
            add_log_file(config.log_file)
        log.info(f"Config loaded: {len(config.users)} participants.")

        if args.dry_run:
            dry_run(config)
            log.info("Dry run complete; no messages sent.")
            return

        if not config.users:
            log.warning("No participants configured; not connecting to Slack.")
            return

        session = session_factory(config.token, on_ready=partial(run_exchange, config=config))
        session.start()
        log.info("✓ Secret Santa messages delivered.")

    except Exception as e:
        log.error(f"Secret Santa failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
