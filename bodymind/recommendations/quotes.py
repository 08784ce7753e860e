"""
Motivational quotes

The daily quote is chosen deterministically from the user id and date, so a
user sees the same quote all day and a new one tomorrow.
"""

from datetime import date
from typing import Literal, Optional, Sequence
import hashlib
import logging
import random

from pydantic import BaseModel

from bodymind.models.recommendation import Quote

logger = logging.getLogger(__name__)

QuoteCategory = Literal["motivation", "mind", "body", "balance", "consistency", "atomic_habits"]


class CatalogQuote(BaseModel):
    text: str
    author: Optional[str] = None
    category: QuoteCategory


DEFAULT_QUOTE = Quote(text="Every day, do something for your Body and Mind.", author=None)

QUOTES: tuple[CatalogQuote, ...] = (
    CatalogQuote(text="Yesterday I was clever, so I wanted to change the world. Today I am wise, so I am changing myself.", author="Rumi", category="motivation"),
    CatalogQuote(text="The quieter you become, the more you can hear.", author="Rumi", category="mind"),
    CatalogQuote(text="Be like a tree and let the dead leaves drop.", author="Rumi", category="balance"),
    CatalogQuote(text="Your routine creates you.", author="Jay Shetty", category="atomic_habits"),
    CatalogQuote(text="Small daily improvements are the key to staggering long-term results.", author="Jay Shetty", category="consistency"),
    CatalogQuote(text="The goal is not to be better than anyone else, but to be better than you used to be.", author="Jay Shetty", category="motivation"),
    CatalogQuote(text="Life is like riding a bicycle. To keep your balance, you must keep moving.", author="Albert Einstein", category="balance"),
    CatalogQuote(text="In the middle of difficulty lies opportunity.", author="Albert Einstein", category="motivation"),
    CatalogQuote(text="Learn from yesterday, live for today, hope for tomorrow.", author="Albert Einstein", category="consistency"),
    CatalogQuote(text="Meditation takes us from survival to creation.", author="Joe Dispenza", category="mind"),
    CatalogQuote(text="Where you place your attention is where you place your energy.", author="Joe Dispenza", category="consistency"),
    CatalogQuote(text="If you want a new outcome, you will have to break the habit of being yourself.", author="Joe Dispenza", category="atomic_habits"),
    CatalogQuote(text="Your body is your unconscious mind.", author="Joe Dispenza", category="body"),
    CatalogQuote(text="The quality of your mind determines the quality of your life.", author="Sam Harris", category="mind"),
    CatalogQuote(text="Wisdom is nothing more profound than the ability to follow one's own advice.", author="Sam Harris", category="balance"),
)


def _seed_index(seed: str, modulo: int) -> int:
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") % modulo


def daily_quote(user_id: str, day: date, quotes: Sequence[CatalogQuote] = QUOTES) -> Quote:
    """Quote for this user on this day; stable for the whole day"""
    if not quotes:
        return DEFAULT_QUOTE.model_copy()

    chosen = quotes[_seed_index(f"{user_id}-{day.isoformat()}", len(quotes))]
    return Quote(text=chosen.text, author=chosen.author)


def random_quote(
    category: Optional[str] = None,
    quotes: Sequence[CatalogQuote] = QUOTES,
    rng: Optional[random.Random] = None,
) -> Quote:
    """Random quote, optionally restricted to one category"""
    pool = [q for q in quotes if category is None or q.category == category]
    if not pool:
        logger.debug(f"No quotes for category {category}, using default")
        return DEFAULT_QUOTE.model_copy()

    chosen = (rng or random).choice(pool)
    return Quote(text=chosen.text, author=chosen.author)
