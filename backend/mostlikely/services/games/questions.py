"""Question catalog and round selection.

Standard questions carry a tone (``mild`` < ``spicy`` < ``drøy``) and a
risk flag. The late-night pack is only reachable in 18+ mode and is
sampled from its default-eligible subset without tone/risk filtering.
"""

import random
from dataclasses import dataclass

from .errors import InvalidInput, PolicyBlocked
from .rules import GROUP_LARGE, GROUP_SMALL

TONE_MILD = 'mild'
TONE_SPICY = 'spicy'
TONE_DROY = 'drøy'
TONES = (TONE_MILD, TONE_SPICY, TONE_DROY)

RISK_SAFE = 'safe'
RISK_RELATIONSHIP = 'relationship-risk'

MODE_STANDARD = 'standard'
MODE_ADULT = '18+'
GAME_MODES = (MODE_STANDARD, MODE_ADULT)

# Spread of the random nudge added to the tone score. Tone tiers are one
# point apart, so a spread above 0.5 lets neighbouring tiers interleave.
TONE_BIAS_JITTER = 0.75


@dataclass(frozen=True)
class Question:
    text: str
    tone: str
    risk: str = RISK_SAFE
    default_eligible: bool = False


def _q(text, tone, risk=RISK_SAFE):
    return Question(text=text, tone=tone, risk=risk)


STANDARD_QUESTIONS = [
    # mild / safe
    _q("Hvem er mest sannsynlig til å glemme hvor de parkerte bilen?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å sovne på kinoen?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å snakke med seg selv høyt?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å gråte av en reklame?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å bli med på en spontan roadtrip?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å google seg selv?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å miste telefonen på do?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å bli funnet sovende på et merkelig sted?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å glemme bursdagen til noen?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å sende en skjermdump til feil person?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å si noe pinlig foran sjefen?", TONE_MILD),
    _q("Hvem er mest sannsynlig til å snuble på offentlig sted?", TONE_MILD),
    # spicy / safe
    _q("Hvem er mest sannsynlig til å bli utestengt fra en bar?", TONE_SPICY),
    _q("Hvem er mest sannsynlig til å kaste opp i en taxi?", TONE_SPICY),
    _q("Hvem er mest sannsynlig til å gråte på do på en fest?", TONE_SPICY),
    _q("Hvem er mest sannsynlig til å bli arrestert for noe pinlig?", TONE_SPICY),
    _q("Hvem er mest sannsynlig til å våkne opp med en tatovering de ikke husker?", TONE_SPICY),
    _q("Hvem er mest sannsynlig til å ringe sjefen sin på fylla?", TONE_SPICY),
    _q("Hvem er mest sannsynlig til å gjøre noe dumt på video som går viralt?", TONE_SPICY),
    _q("Hvem er mest sannsynlig til å krasje en bryllupsfest?", TONE_SPICY),
    # spicy / relationship-risk
    _q("Hvem er mest sannsynlig til å sende en melding til eksen klokka 3 om natta?", TONE_SPICY, RISK_RELATIONSHIP),
    _q("Hvem er mest sannsynlig til å hooke med noen de jobber med?", TONE_SPICY, RISK_RELATIONSHIP),
    _q("Hvem er mest sannsynlig til å glemme bursdagen til partneren sin?", TONE_SPICY, RISK_RELATIONSHIP),
    _q("Hvem er mest sannsynlig til å fortelle en hemmelighet de lovte å holde?", TONE_SPICY, RISK_RELATIONSHIP),
    # drøy / safe
    _q("Hvem er mest sannsynlig til å starte en slåsskamp på fylla?", TONE_DROY),
    _q("Hvem er mest sannsynlig til å bli kastet ut av et hotell?", TONE_DROY),
    # drøy / relationship-risk
    _q("Hvem er mest sannsynlig til å våkne opp i en fremmed seng uten å huske hvordan de kom dit?", TONE_DROY, RISK_RELATIONSHIP),
    _q("Hvem er mest sannsynlig til å sende nudes til feil person?", TONE_DROY, RISK_RELATIONSHIP),
    _q("Hvem er mest sannsynlig til å ha en one night stand med noen i denne gruppa?", TONE_DROY, RISK_RELATIONSHIP),
    _q("Hvem er mest sannsynlig til å ødelegge noen andres forhold?", TONE_DROY, RISK_RELATIONSHIP),
]


def _late(text, default_eligible=True, risk=RISK_SAFE):
    return Question(text=text, tone=TONE_DROY, risk=risk, default_eligible=default_eligible)


LATE_NIGHT_QUESTIONS = [
    _late("Hvem er mest sannsynlig til å like dirty talk mer enn de innrømmer?"),
    _late("Hvem er mest sannsynlig til å bli tent av en stemme alene?"),
    _late("Hvem er mest sannsynlig til å være mye mer åpen enn folk tror?"),
    _late("Hvem er mest sannsynlig til å like litt maktspill på soverommet?"),
    _late("Hvem er mest sannsynlig til å være farligere i senga enn på festen?"),
    _late("Hvem er mest sannsynlig til å ligge med noen på første date?"),
    _late("Hvem er mest sannsynlig til å ha et sexleketøy med app?"),
    _late("Hvem er mest sannsynlig til å ha et sexleketøy liggende lett tilgjengelig?"),
    _late("Hvem er mest sannsynlig til å ha sex på et upraktisk sted?"),
    _late("Hvem er mest sannsynlig til å ha sex på et offentlig sted?"),
    _late("Hvem er mest sannsynlig til å ha en hemmelig fetish?"),
    _late("Hvem er mest sannsynlig til å ha et one night stand uten å vite navnet dagen etter?"),
    _late("Hvem er mest sannsynlig til å ligge med noen bare for historien?"),
    _late("Hvem er mest sannsynlig til å ha sex uten følelser og være helt ok med det?"),
    _late("Hvem er mest sannsynlig til å ha sett mer porno enn de vil innrømme?"),
    _late("Hvem er mest sannsynlig til å ha sendt et frekt bilde i kveld?"),
    _late("Hvem er mest sannsynlig til å ha blitt tatt på fersken?"),
    _late("Hvem er mest sannsynlig til å prøve hva som helst én gang i senga?"),
    _late("Hvem er mest sannsynlig til å ha en stripper-spilleliste klar?"),
    _late("Hvem er mest sannsynlig til å gå rett på sak etter to drinker?"),
    _late("Hvem er mest sannsynlig til å flørte uten å mene noe med det?", False, RISK_RELATIONSHIP),
    _late("Hvem er mest sannsynlig til å fantasere om noen i dette rommet?", False, RISK_RELATIONSHIP),
    _late("Hvem er mest sannsynlig til å tenke «det der kunne blitt noe mer» i kveld?", False, RISK_RELATIONSHIP),
    _late("Hvem er mest sannsynlig til å sende et frekt bilde bare for moro skyld?", False),
]


def default_late_night_questions() -> list[Question]:
    return [q for q in LATE_NIGHT_QUESTIONS if q.default_eligible]


def admitted_tones(tone: str) -> tuple:
    """Tones are cumulative: each setting admits itself and everything milder."""
    if tone not in TONES:
        raise InvalidInput(f'Invalid tone: {tone!r}', code='invalid_tone')
    return TONES[:TONES.index(tone) + 1]


def filter_questions(questions, tone: str, couples_safe: bool) -> list[Question]:
    tones = admitted_tones(tone)
    pool = [q for q in questions if q.tone in tones]
    if couples_safe:
        pool = [q for q in pool if q.risk == RISK_SAFE]
    return pool


def _tone_score(question: Question, size: str) -> int:
    if size == GROUP_LARGE:
        order = {TONE_DROY: 2, TONE_SPICY: 1}
    else:
        order = {TONE_MILD: 2, TONE_SPICY: 1}
    return order.get(question.tone, 0)


def bias_for_group_size(questions, size: str, rng: random.Random) -> list[Question]:
    """Shuffle, then nudge large groups toward harder tones and small groups toward milder ones.

    Medium groups keep the plain shuffle.
    """
    shuffled = list(questions)
    rng.shuffle(shuffled)
    if size not in (GROUP_LARGE, GROUP_SMALL):
        return shuffled
    keyed = [(_tone_score(q, size) + rng.uniform(-TONE_BIAS_JITTER, TONE_BIAS_JITTER), q) for q in shuffled]
    keyed.sort(key=lambda pair: pair[0], reverse=True)
    return [q for _, q in keyed]


def select_round_questions(mode: str, tone: str, couples_safe: bool, size: str,
                           rng: random.Random, count: int = 20) -> list[str]:
    """Pick the question texts for one round.

    - 18+ mode samples the default-eligible late-night pack
    - standard mode filters by tone/risk, then applies the group-size bias
    - raises PolicyBlocked when fewer than ``count`` questions qualify
    """
    if mode == MODE_ADULT:
        pool = default_late_night_questions()
        if len(pool) < count:
            raise PolicyBlocked('Too few questions in the late-night pack', code='insufficient_questions')
        return [q.text for q in rng.sample(pool, count)]

    pool = filter_questions(STANDARD_QUESTIONS, tone, couples_safe)
    if len(pool) < count:
        raise PolicyBlocked('Too few questions for this tone and couples-safe combination',
                            code='insufficient_questions')
    return [q.text for q in bias_for_group_size(pool, size, rng)[:count]]
