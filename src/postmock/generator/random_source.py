"""Randomness used by dynamic-mode response generation.

A ``RandomSource`` bundles a ``random.Random`` with a Faker instance
seeded from it, so a test can pin every draw with a single seed or
override individual methods in a subclass.
"""

import math
import random
import string
from datetime import datetime, timezone

from faker import Faker

MAX_SAFE_INTEGER = 2**53 - 1

DEPARTMENTS = (
    "Books", "Clothing", "Electronics", "Garden", "Grocery",
    "Health", "Home", "Music", "Outdoors", "Sports", "Tools", "Toys",
)


def iso_timestamp(dt: datetime) -> str:
    """Format ``dt`` as UTC ISO-8601 with milliseconds, e.g. ``2024-01-01T00:00:00.000Z``."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


class RandomSource:
    """Random draws and fake data for dynamic responses."""

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)
        self.faker = Faker()
        if seed is not None:
            self.faker.seed_instance(seed)

    # -- primitive draws -----------------------------------------------------

    def random(self) -> float:
        """A float in [0, 1)."""
        return self.rng.random()

    def between(self, low, high):
        """Integer-stepped draw in ``[low, high]``.

        Computed as ``floor(r * (high - low + 1)) + low``; when ``high < low``
        the result can fall below ``low``, which callers rely on.
        """
        return math.floor(self.random() * (high - low + 1)) + low

    def integer(self, low: int = 0, high: int = MAX_SAFE_INTEGER) -> int:
        return self.rng.randint(low, high)

    def boolean(self) -> bool:
        return self.rng.random() < 0.5

    def pick(self, seq):
        """Uniform choice; ``None`` for an empty sequence."""
        if not seq:
            return None
        return seq[math.floor(self.random() * len(seq))]

    def alphanumeric(self, length: int) -> str:
        return "".join(self.rng.choices(string.ascii_letters + string.digits, k=length))

    # -- fake data -----------------------------------------------------------

    def recent_datetime(self) -> datetime:
        return self.faker.date_time_between(start_date="-1d", end_date="now", tzinfo=timezone.utc)

    def timestamp(self) -> str:
        return iso_timestamp(self.recent_datetime())

    def date(self) -> str:
        return self.timestamp().split("T")[0]

    def uuid(self) -> str:
        return self.faker.uuid4()

    def email(self) -> str:
        return self.faker.email()

    def user_name(self) -> str:
        return self.faker.user_name()

    def first_name(self) -> str:
        return self.faker.first_name()

    def last_name(self) -> str:
        return self.faker.last_name()

    def full_name(self) -> str:
        return self.faker.name()

    def word(self) -> str:
        return self.faker.word()

    def sentence(self) -> str:
        return self.faker.sentence()

    def paragraph(self) -> str:
        return self.faker.paragraph()

    def paragraphs(self, count: int) -> str:
        return "\n".join(self.faker.paragraphs(nb=count))

    def image_url(self) -> str:
        return self.faker.image_url()

    def product_name(self) -> str:
        return f"{self.faker.color_name()} {self.faker.word().capitalize()}"

    def product_description(self) -> str:
        return self.faker.text(max_nb_chars=160)

    def department(self) -> str:
        return self.pick(DEPARTMENTS)

    def price(self) -> float:
        return round(self.rng.uniform(1, 1000), 2)
