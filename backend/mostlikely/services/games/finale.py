import random

from mostlikely.models import Award, FinaleSummary, LeaderboardEntry
from .avatars import DEFAULT_AVATAR_ID

TITLE_MOST_WINS = 'Kveldens hovedkarakter'
TITLE_MOST_VOTES = 'Kveldens kaosmagnet'
TITLE_FEWEST_VOTES = 'Kveldens uskyldige'
WILDCARD_TITLES = (
    'Kveldens mysterium',
    'Kveldens joker',
    'Kveldens overraskelse',
    'Kveldens nøytrale',
)


def _leader(counts: dict):
    """First name holding the strictly highest count, in insertion order."""
    best_name, best = None, 0
    for name, n in counts.items():
        if n > best:
            best_name, best = name, n
    return best_name, best


def summarize(roster, wins_by_name: dict, votes_received_by_name: dict,
              rng: random.Random) -> FinaleSummary:
    """Build the end-of-game awards and the top-3 by wins.

    Recomputed on every read; the wildcard pick therefore varies between polls.
    """
    avatars = {p.name: p.avatar_id for p in roster}

    def avatar_of(name):
        return avatars.get(name, DEFAULT_AVATAR_ID)

    awards = []

    main_character, max_wins = _leader(wins_by_name)
    if main_character and max_wins > 0:
        awards.append(Award(TITLE_MOST_WINS, main_character, avatar_of(main_character), f'{max_wins} seire'))

    chaos_magnet, max_votes = _leader(votes_received_by_name)
    if chaos_magnet and max_votes > 0:
        awards.append(Award(TITLE_MOST_VOTES, chaos_magnet, avatar_of(chaos_magnet), f'{max_votes} stemmer totalt'))

    innocent, min_votes = None, None
    for p in roster:
        n = votes_received_by_name.get(p.name, 0)
        if min_votes is None or n < min_votes:
            innocent, min_votes = p.name, n
    if innocent and innocent not in (main_character, chaos_magnet):
        value = 'Null stemmer!' if min_votes == 0 else f'Bare {min_votes} stemmer'
        awards.append(Award(TITLE_FEWEST_VOTES, innocent, avatar_of(innocent), value))

    awarded = {a.name for a in awards}
    remaining = [p for p in roster if p.name not in awarded]
    if remaining:
        lucky = rng.choice(remaining)
        awards.append(Award(rng.choice(WILDCARD_TITLES), lucky.name, lucky.avatar_id, '🎲'))

    ranked = sorted(wins_by_name.items(), key=lambda item: item[1], reverse=True)[:3]
    top3 = [LeaderboardEntry(name=name, wins=wins, avatar_id=avatar_of(name)) for name, wins in ranked]
    return FinaleSummary(awards=awards, top3=top3)
