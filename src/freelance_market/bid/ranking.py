"""
Bid Ranking Strategies

Pure ordering functions over BidView lists, selected by name through a
lookup table. No strategy mutates its input; sorts are stable, so bids
that tie keep their input order and the same input always yields the
same output.

Adding a strategy means adding a RankBy member and a table entry.
"""

from collections.abc import Callable, Sequence
from enum import Enum

from freelance_market.bid.models import BidView

RankFunction = Callable[[Sequence[BidView]], list[BidView]]

# Composite score weights: rating counts 1.5x the inverse-price term
INVERSE_PRICE_WEIGHT = 0.4
RATING_WEIGHT = 0.6


class RankBy(str, Enum):
    """Ranking strategies selectable by clients"""

    PRICE = "price"
    RATING = "rating"
    COMPOSITE = "composite"


def composite_score(view: BidView) -> float:
    """
    Weighted value of a bid: (1 / proposed_rate) * 0.4 + rating * 0.6

    proposed_rate is always positive (enforced on Bid), so no zero division.

    Example:
        rate 80, rating 4.5 → 0.005 + 2.7 = 2.705
    """
    return (1 / float(view.proposed_rate)) * INVERSE_PRICE_WEIGHT + (
        view.freelancer_rating * RATING_WEIGHT
    )


def rank_by_price(bids: Sequence[BidView]) -> list[BidView]:
    """Cheapest first"""
    return sorted(bids, key=lambda v: v.proposed_rate)


def rank_by_rating(bids: Sequence[BidView]) -> list[BidView]:
    """Highest-rated freelancer first"""
    return sorted(bids, key=lambda v: v.freelancer_rating, reverse=True)


def rank_by_composite(bids: Sequence[BidView]) -> list[BidView]:
    """Highest composite score first"""
    return sorted(bids, key=composite_score, reverse=True)


STRATEGIES: dict[RankBy, RankFunction] = {
    RankBy.PRICE: rank_by_price,
    RankBy.RATING: rank_by_rating,
    RankBy.COMPOSITE: rank_by_composite,
}


def resolve_rank_by(name: str | None) -> RankBy:
    """
    Map a strategy name to RankBy, defaulting to COMPOSITE

    Unknown, empty and missing names all fall back to COMPOSITE; callers
    never need to validate the name first.
    """
    if not name:
        return RankBy.COMPOSITE
    try:
        return RankBy(name.strip().lower())
    except ValueError:
        return RankBy.COMPOSITE


def get_strategy(name: str | None) -> RankFunction:
    """
    Look up a ranking function by name

    Example:
        >>> get_strategy("price") is rank_by_price
        True
        >>> get_strategy("bogus") is get_strategy("composite")
        True
    """
    return STRATEGIES[resolve_rank_by(name)]
