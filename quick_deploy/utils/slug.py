"""Human-readable service names."""

import random

ADJECTIVES = (
    "amber", "bold", "brave", "bright", "calm", "clever", "cosmic", "crisp",
    "daring", "eager", "fancy", "fast", "gentle", "golden", "happy", "jolly",
    "keen", "lively", "lucky", "mellow", "mighty", "nimble", "noble", "proud",
    "quick", "quiet", "rapid", "shiny", "silent", "smooth", "snappy", "solar",
    "steady", "sunny", "swift", "tidy", "vivid", "warm", "witty", "zesty",
)

NOUNS = (
    "badger", "beacon", "breeze", "canyon", "comet", "coral", "cricket",
    "delta", "ember", "falcon", "fjord", "forest", "galaxy", "glacier",
    "harbor", "heron", "island", "lagoon", "lantern", "lynx", "meadow",
    "meteor", "nebula", "orbit", "otter", "panda", "pebble", "prairie",
    "quasar", "raven", "river", "summit", "tiger", "tundra", "valley",
    "walrus", "willow", "wombat", "yak", "zephyr",
)


def generate_slug(rng: random.Random | None = None) -> str:
    """Return a two-word slug such as ``brave-otter``."""
    rng = rng or random.SystemRandom()
    return f"{rng.choice(ADJECTIVES)}-{rng.choice(NOUNS)}"
