"""
The Secret Santa exchange, run when the Slack session becomes ready:
pair everyone, verify, then DM each giver their receiver one at a time.
"""

import logging
import random
from typing import Mapping, Optional, Sequence

from pairing.assigner import Pairing, assign_pairings, verify_pairings
from sources.config_reader import SantaConfig

log = logging.getLogger(__name__)

TEST_BANNER = "# THIS IS A TEST MESSAGE, THESE AREN'T THE REAL PAIRINGS"


def build_message(
    receiver_id: str, template: str, test_run: bool = False, hint: Optional[str] = None
) -> str:
    text = template.format(receiver=f"<@{receiver_id}>")
    if hint:
        text = f"{text}\nThey wanted you to know this:\n```\n{hint}\n```"
    if test_run:
        text = f"{TEST_BANNER}\n\n{text}"
    return text


def notify_pairings(
    session,
    pairings: Sequence[Pairing],
    template: str,
    test_run: bool = False,
    hints: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Resolve every giver first, then send one DM per pairing, sequentially.
    The first lookup or delivery error stops the run; nothing is retried.
    Returns the number of messages sent.
    """
    hints = hints or {}
    givers = []
    for pairing in pairings:
        givers.append(session.fetch_user(pairing.giver))
    log.info(f"Resolved {len(givers)} givers.")

    sent = 0
    for user, pairing in zip(givers, pairings):
        text = build_message(pairing.receiver, template, test_run, hints.get(pairing.receiver))
        session.send(user, text)
        sent += 1
        log.info(f"Sent {sent}/{len(pairings)} (to {user.name}).")
    return sent


def run_exchange(session, config: SantaConfig, rng: Optional[random.Random] = None) -> int:
    if rng is None:
        rng = random.Random(config.seed)
    pairings = assign_pairings(config.users, rng=rng)
    verify_pairings(pairings, config.users)
    if not pairings:
        log.warning("No participants configured; nothing to send.")
        return 0
    return notify_pairings(session, pairings, config.message, config.test_run, config.hints)
