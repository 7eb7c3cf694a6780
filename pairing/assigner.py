"""
Secret Santa pairing: every participant gives exactly once and receives exactly once,
and nobody draws themselves.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence

log = logging.getLogger(__name__)


class PairingError(RuntimeError):
    pass


@dataclass(frozen=True)
class Pairing:
    giver: str
    receiver: str


def _check_participants(participants: Sequence[str]) -> None:
    duplicates = sorted(p for p, n in Counter(participants).items() if n > 1)
    if duplicates:
        raise PairingError(f"Duplicate participants: {duplicates}")
    if len(participants) == 1:
        raise PairingError("A single participant cannot be paired with anyone else.")


def assign_pairings(
    participants: Sequence[str], rng: Optional[random.Random] = None
) -> list[Pairing]:
    """
    Shuffle givers and receivers independently, then repair fixed points in one pass.

    A fixed point at i is swapped with a random other position j. Since
    receivers[j] != givers[i] and the old receivers[i] == givers[i] != givers[j],
    the swap clears position i without creating a new fixed point, so the pass
    always terminates with a derangement. Not uniform over derangements.
    """
    _check_participants(participants)
    rng = rng or random.Random()

    givers = list(participants)
    rng.shuffle(givers)
    receivers = list(givers)
    rng.shuffle(receivers)

    n = len(givers)
    repaired = 0
    for i in range(n):
        if receivers[i] != givers[i]:
            continue
        j = rng.randrange(n - 1)
        if j >= i:
            j += 1
        receivers[i], receivers[j] = receivers[j], receivers[i]
        repaired += 1

    log.debug(f"Assigned {n} pairings ({repaired} collisions repaired).")
    return [Pairing(g, r) for g, r in zip(givers, receivers)]


def verify_pairings(pairings: Sequence[Pairing], participants: Sequence[str]) -> None:
    """Raise PairingError listing every way the pairings fail to cover the participants."""
    participant_set = set(participants)
    giver_list = [p.giver for p in pairings]
    receiver_list = [p.receiver for p in pairings]
    giver_set = set(giver_list)
    receiver_set = set(receiver_list)

    issues = []

    missing_givers = participant_set - giver_set
    if missing_givers:
        issues.append(f"Missing givers: {sorted(missing_givers)}")

    missing_receivers = participant_set - receiver_set
    if missing_receivers:
        issues.append(f"Missing receivers: {sorted(missing_receivers)}")

    extra_givers = giver_set - participant_set
    if extra_givers:
        issues.append(f"Unexpected givers: {sorted(extra_givers)}")

    extra_receivers = receiver_set - participant_set
    if extra_receivers:
        issues.append(f"Unexpected receivers: {sorted(extra_receivers)}")

    if len(giver_list) != len(giver_set):
        issues.append("Duplicate givers detected")

    if len(receiver_list) != len(receiver_set):
        issues.append("Duplicate receivers detected")

    self_paired = sorted(p.giver for p in pairings if p.giver == p.receiver)
    if self_paired:
        issues.append(f"Self pairings: {self_paired}")

    if issues:
        raise PairingError("Pairing verification failed; " + "; ".join(issues))

    # Summary only; never log who gives to whom here.
    log.info(f"Verification passed: {len(giver_set)} givers matched to {len(receiver_set)} receivers.")
