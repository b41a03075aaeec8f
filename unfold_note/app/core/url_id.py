"""Short public identifiers used in project and note URLs."""

import secrets
from typing import Callable

# 0, O, 1, I and l are left out so ids survive being read aloud or retyped.
URL_ID_ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
URL_ID_LENGTH = 15
MAX_URL_ID_ATTEMPTS = 10


class UrlIdGenerationError(RuntimeError):
    """Raised when no unused url id was found within the attempt limit."""


def generate_url_id(length: int = URL_ID_LENGTH) -> str:
    return "".join(secrets.choice(URL_ID_ALPHABET) for _ in range(length))


def generate_unique_url_id(
    exists: Callable[[str], bool],
    max_attempts: int = MAX_URL_ID_ATTEMPTS,
) -> str:
    """Draw ids until ``exists`` reports one as free."""
    for _ in range(max_attempts):
        url_id = generate_url_id()
        if not exists(url_id):
            return url_id
    raise UrlIdGenerationError("Could not generate a unique URL identifier. Please try again later.")
