import random

AVATARS = [
    # Party faces
    {'id': 'party', 'icon': '🥳'},
    {'id': 'cool', 'icon': '😎'},
    {'id': 'crazy', 'icon': '🤪'},
    {'id': 'cowboy', 'icon': '🤠'},
    {'id': 'ghost', 'icon': '👻'},
    {'id': 'devil', 'icon': '😈'},
    {'id': 'clown', 'icon': '🤡'},
    {'id': 'disguise', 'icon': '🥸'},
    {'id': 'monocle', 'icon': '🧐'},
    {'id': 'nerd', 'icon': '🤓'},
    {'id': 'skull', 'icon': '💀'},
    {'id': 'alien', 'icon': '👽'},
    {'id': 'robot', 'icon': '🤖'},
    {'id': 'superhero', 'icon': '🦸'},
    {'id': 'wizard', 'icon': '🧙'},
    {'id': 'vampire', 'icon': '🧛'},
    {'id': 'ninja', 'icon': '🥷'},
    {'id': 'princess', 'icon': '👸'},
    # Fantasy & fun
    {'id': 'unicorn', 'icon': '🦄'},
    {'id': 'dragon', 'icon': '🐲'},
    {'id': 'fairy', 'icon': '🧚'},
    {'id': 'mermaid', 'icon': '🧜'},
    {'id': 'trex', 'icon': '🦖'},
    {'id': 'octopus', 'icon': '🐙'},
    {'id': 'pumpkin', 'icon': '🎃'},
    {'id': 'fire', 'icon': '🔥'},
    {'id': 'rainbow', 'icon': '🌈'},
    {'id': 'star', 'icon': '⭐'},
]

AVATAR_IDS = frozenset(a['id'] for a in AVATARS)
DEFAULT_AVATAR_ID = AVATARS[0]['id']


def get_avatars() -> list[dict]:
    return [dict(a) for a in AVATARS]


def is_valid_avatar(avatar_id) -> bool:
    return avatar_id in AVATAR_IDS


def random_avatar_id(rng: random.Random) -> str:
    return rng.choice(AVATARS)['id']
