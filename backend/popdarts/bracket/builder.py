from __future__ import annotations

import logging
import math
import random
from typing import Sequence

from popdarts.bracket.models import BYE, BracketMatch, TournamentBracket
from popdarts.scoring.game import Player

_LOG = logging.getLogger(__name__)

MIN_PLAYERS = 4
MAX_PLAYERS = 16


def _match_id(round_num: int, match_number: int) -> str:
    return f"r{round_num}-m{match_number}"


def build_bracket(
    players: Sequence[Player], *, rng: random.Random | None = None
) -> TournamentBracket:
    """
    Seed players into a single-elimination bracket.

    - Players are shuffled, then the bracket is padded to the next power of two.
    - Byes go to the first ceil(byes/2) and last floor(byes/2) seeds; bye
      players skip round 1 and are placed straight into round 2.
    - Every later match is created up front with empty slots that record which
      matches feed them.
    """
    named = [p for p in players if p.name.strip()]
    if len(named) < MIN_PLAYERS:
        raise ValueError(f"a tournament needs at least {MIN_PLAYERS} named players")
    if len(named) > MAX_PLAYERS:
        raise ValueError(f"brackets larger than {MAX_PLAYERS} players are not supported")

    rng = rng or random.Random()
    shuffled = list(named)
    rng.shuffle(shuffled)

    n = len(shuffled)
    total_rounds = math.ceil(math.log2(n))
    bracket_size = 2**total_rounds
    byes_needed = bracket_size - n

    head = math.ceil(byes_needed / 2)
    tail = byes_needed // 2
    bye_players = shuffled[:head] + shuffled[n - tail :]
    first_round_players = shuffled[head : n - tail]

    first_round = tuple(
        BracketMatch(
            id=_match_id(1, i // 2),
            round=1,
            match_number=i // 2,
            player1=first_round_players[i],
            player2=first_round_players[i + 1],
        )
        for i in range(0, len(first_round_players) - 1, 2)
    )
    rounds: list[tuple[BracketMatch, ...]] = [first_round]

    for round_num in range(2, total_rounds + 1):
        previous = rounds[-1]
        matches: list[BracketMatch] = []
        for i in range(2 ** (total_rounds - round_num)):
            slots: list[Player | None] = [None, None]
            sources: list[str | None] = [None, None]
            for side, prev_idx in enumerate((2 * i, 2 * i + 1)):
                if prev_idx < len(previous):
                    sources[side] = previous[prev_idx].id
                elif round_num == 2 and prev_idx - len(previous) < len(bye_players):
                    slots[side] = bye_players[prev_idx - len(previous)]
            matches.append(
                BracketMatch(
                    id=_match_id(round_num, i),
                    round=round_num,
                    match_number=i,
                    player1=slots[0],
                    player2=slots[1],
                    source_match1_id=sources[0],
                    source_match2_id=sources[1],
                )
            )
        rounds.append(tuple(matches))

    seed_slots: list[Player] = []
    for m in first_round:
        seed_slots.extend((m.player1, m.player2))
    for p in bye_players:
        seed_slots.extend((p, BYE))

    _LOG.info(
        "bracket built: %d players, size %d, %d byes, %d rounds",
        n, bracket_size, byes_needed, total_rounds,
    )
    return TournamentBracket(
        rounds=tuple(rounds),
        total_rounds=total_rounds,
        seed_slots=tuple(seed_slots),
    )
