# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Passphrase generation and normalisation.

A passphrase is ``word_count`` words drawn independently and uniformly from
WORDLIST with the OS CSPRNG (``secrets``), joined by single spaces.

Security parameter
------------------
WORDLIST holds 256 distinct words, so every word contributes exactly 8 bits:
the default 24-word phrase carries 192 bits of entropy.  At that size a
collision between two generated phrases is not a practical concern, so no
uniqueness check against existing users is made.
"""

import secrets

# -- Word list -------------------------------------------------------------
# 256 short, lower-case, unambiguous English words.  Changing this list
# invalidates nothing already stored (only hashes of full phrases are kept)
# but it does change the entropy per word: keep it at a power of two.
WORDLIST = (
    "able", "acid", "acorn", "actor", "adult", "agent", "alarm", "album",
    "alley", "amber", "angle", "ankle", "apple", "april", "apron", "arena",
    "armor", "arrow", "atlas", "attic", "audio", "autumn", "avenue", "award",
    "bacon", "badge", "bagel", "baker", "bamboo", "banana", "banjo", "barn",
    "basil", "basket", "beach", "beard", "beetle", "bench", "berry", "bicycle",
    "bison", "blanket", "blossom", "bonnet", "bottle", "branch", "bread", "brick",
    "bridge", "bronze", "brook", "bucket", "buffalo", "butter", "cabin", "cactus",
    "camel", "candle", "canoe", "canyon", "carpet", "carrot", "castle", "cattle",
    "cedar", "cello", "chalk", "cherry", "chess", "circus", "cliff", "clock",
    "cloud", "clover", "cobalt", "coconut", "comet", "copper", "coral", "cotton",
    "cousin", "coyote", "crayon", "cricket", "crystal", "cupboard", "daisy", "dancer",
    "delta", "desert", "diamond", "dinner", "dolphin", "donkey", "dragon", "drum",
    "eagle", "earth", "easel", "echo", "elbow", "ember", "engine", "falcon",
    "feather", "fern", "fiddle", "fiesta", "finch", "flute", "forest", "fossil",
    "fountain", "fox", "galaxy", "garden", "garlic", "gazelle", "ginger", "glacier",
    "globe", "goose", "granite", "grape", "gravel", "guitar", "hammer", "harbor",
    "harvest", "hazel", "hedge", "helmet", "heron", "hickory", "honey", "horizon",
    "hornet", "iceberg", "igloo", "island", "ivory", "jacket", "jaguar", "jasmine",
    "jelly", "jigsaw", "jungle", "kayak", "kettle", "kitten", "koala", "ladder",
    "lagoon", "lantern", "lemon", "leopard", "lilac", "lizard", "lobster", "locket",
    "lumber", "magnet", "mango", "maple", "marble", "meadow", "melon", "meteor",
    "mirror", "mitten", "monkey", "mosaic", "muffin", "needle", "nest", "nickel",
    "noodle", "oasis", "ocean", "olive", "onion", "orange", "orchid", "otter",
    "paddle", "panda", "parrot", "peanut", "pebble", "pelican", "pepper", "piano",
    "pickle", "pillow", "pine", "planet", "plum", "pocket", "pony", "poplar",
    "potato", "prairie", "pumpkin", "puzzle", "quartz", "quilt", "rabbit", "radio",
    "raven", "reef", "ribbon", "river", "robin", "rocket", "saddle", "salmon",
    "sandal", "scarf", "shadow", "shell", "silver", "sparrow", "spider", "spruce",
    "squirrel", "stable", "starfish", "summit", "sunset", "swan", "table", "teapot",
    "thistle", "thunder", "tiger", "timber", "tomato", "trumpet", "tulip", "turtle",
    "umbrella", "valley", "velvet", "violet", "volcano", "wagon", "walnut", "walrus",
    "window", "winter", "wizard", "wombat", "yogurt", "zebra", "zephyr", "zipper",
)


def generate_passphrase(word_count: int = 24) -> str:
    """Return *word_count* CSPRNG-chosen words separated by single spaces."""
    if word_count < 1:
        raise ValueError("word_count must be at least 1")
    return " ".join(secrets.choice(WORDLIST) for _ in range(word_count))


def normalize_passphrase(candidate: str) -> str:
    """
    Canonical form used for hashing and verification: lower-case words
    separated by exactly one space.  Users re-typing a phrase commonly add
    stray spaces, line breaks or capitals.
    """
    return " ".join(candidate.lower().split())
