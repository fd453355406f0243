"""
- Secret code generation, with an optional HTTP source
Local sampling is the default. When SECRET_SOURCE=random_org we ask random.org
for the color ids; if anything goes wrong (no internet, timeout, bad response),
we fall back to local sampling so the game still works.
"""

import logging
from secrets import randbelow
from typing import List

import requests

from .types import Code, PALETTE

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/integers/"


def sample_code(length: int) -> Code:
    # Independent uniform pick per peg; colors may repeat
    return [PALETTE[randbelow(len(PALETTE))] for _ in range(length)]


def fetch_code(length: int, source: str = "local") -> Code:
    if source != "random_org":
        return sample_code(length)

    # Parameters to send to random.org
    params = {
        "num": length,              # one number per peg
        "min": 0,                   # first palette index
        "max": len(PALETTE) - 1,    # last palette index
        "col": 1,                   # one number per line
        "base": 10,
        "format": "plain",          # plain text response
        "rnd": "new",               # always generate new numbers
    }

    # keep network quick; if it takes too long, we will just fallback
    timeout_seconds = 3.0

    try:
        response = requests.get(RANDOM_URL, params=params, timeout=timeout_seconds)
        response.raise_for_status()

        # The body looks like:
        #   0\n3\n6\n2\n
        values = [int(line) for line in response.text.splitlines() if line.strip() != ""]

        if len(values) != length:
            raise ValueError(f"random.org returned {len(values)} values, expected {length}.")
        for value in values:
            if value < 0 or value >= len(PALETTE):
                raise ValueError(f"random.org number out of range 0..{len(PALETTE) - 1}.")

        return [PALETTE[value] for value in values]

    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable (%s); sampling the code locally", exc)
        return sample_code(length)
