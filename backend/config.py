import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Roster bounds
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '3'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '12'))
    QUESTIONS_PER_ROUND = int(os.environ.get('QUESTIONS_PER_ROUND', '20'))
    # Per-question timer (seconds) by group size
    QUESTION_DURATION_SMALL_SEC = int(os.environ.get('QUESTION_DURATION_SMALL_SEC', '20'))
    QUESTION_DURATION_MEDIUM_SEC = int(os.environ.get('QUESTION_DURATION_MEDIUM_SEC', '18'))
    QUESTION_DURATION_LARGE_SEC = int(os.environ.get('QUESTION_DURATION_LARGE_SEC', '15'))
    # Client-side hold times, published in the state so polling clients pace themselves
    REVEAL_HOLD_SEC = int(os.environ.get('REVEAL_HOLD_SEC', '5'))
    INTERSTITIAL_MS = int(os.environ.get('INTERSTITIAL_MS', '1000'))
    # Fairness tuning
    RECENT_WINNERS_LIMIT = int(os.environ.get('RECENT_WINNERS_LIMIT', '3'))
    OVER_TARGETED_MIN_VOTES = int(os.environ.get('OVER_TARGETED_MIN_VOTES', '3'))
    OVER_TARGETED_MIN_REMAINING = int(os.environ.get('OVER_TARGETED_MIN_REMAINING', '4'))
    OVER_TARGETED_THRESHOLD = int(os.environ.get('OVER_TARGETED_THRESHOLD', '2'))
    # 18+ unlock window (hours) and abandoned-checkout timeout (sec)
    UNLOCK_WINDOW_HOURS = int(os.environ.get('UNLOCK_WINDOW_HOURS', '24'))
    CHECKOUT_TTL_SEC = int(os.environ.get('CHECKOUT_TTL_SEC', '900'))
    # Optional: debounce controller actions (ms). 0 disables.
    CONTROLLER_DEBOUNCE_MS = int(os.environ.get('CONTROLLER_DEBOUNCE_MS', '0'))
    # Optional: seed the session's random source (tie-breaks, rerolls, shuffles)
    RANDOM_SEED = os.environ.get('RANDOM_SEED')
