# matching.py

import logging

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20

# (threshold, points) pairs, checked top down, first strict "greater than" wins
BUDGET_PER_FOLLOWER_TIERS = [(0.01, 30), (0.005, 20)]
BUDGET_PER_FOLLOWER_FLOOR = 10

ENGAGEMENT_TIERS = [(5, 30), (2, 20), (0, 10)]


def _number(value):
    """Coerce a profile field to a float, anything unusable counts as 0"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _tier(value, tiers, floor=0):
    for threshold, points in tiers:
        if value > threshold:
            return points
    return floor


def niche_points(reference, candidate):
    # Exact string comparison, not tag overlap
    if candidate.get('niche') == reference.get('niche'):
        return 40
    if candidate.get('niche'):
        return 10
    return 0


def location_points(reference, candidate):
    if candidate.get('location') == reference.get('location'):
        return 30
    if candidate.get('location'):
        return 10
    return 0


def fit_points(reference, candidate):
    """Budget fit for creators looking at brands, engagement fit for brands"""

    if reference.get('user_type') == 'creator':
        followers = _number(reference.get('follower_count'))
        if followers <= 0:
            return 0
        budget_per_follower = _number(candidate.get('marketing_budget')) / followers
        return _tier(budget_per_follower, BUDGET_PER_FOLLOWER_TIERS, BUDGET_PER_FOLLOWER_FLOOR)

    engagement = _number(candidate.get('engagement_rate'))
    return _tier(engagement, ENGAGEMENT_TIERS)


def calculate_match(reference, candidate):
    """Calculate match score 0-100"""

    score = 0

    # 1. Niche match (40 points)
    score += niche_points(reference, candidate)

    # 2. Location match (30 points)
    score += location_points(reference, candidate)

    # 3. Budget / engagement fit (30 points)
    score += fit_points(reference, candidate)

    return min(100, score)


def rank_candidates(reference, candidates, limit=DEFAULT_LIMIT):
    """Return the best `limit` candidates for reference, highest score first.

    Candidates are expected to be pre-filtered to the opposite user_type with
    the reference itself excluded. Each result is a copy of the candidate
    with a `calculatedScore` key added; inputs are never modified.
    """

    ranked = []
    for candidate in candidates:
        scored = dict(candidate)
        scored['calculatedScore'] = calculate_match(reference, candidate)
        ranked.append(scored)

    # Sort by match score descending, ties keep their original order
    ranked.sort(key=lambda x: x['calculatedScore'], reverse=True)

    logger.debug("Ranked %d candidates for %s profile, keeping %d",
                 len(ranked), reference.get('user_type'), min(limit, len(ranked)))

    return ranked[:limit]


def _tags(value):
    return {part.strip().lower() for part in (value or '').split(',') if part.strip()}


def filter_candidates(candidates, niches=None, locations=None, max_budget=None, min_engagement=None):
    """Keep candidates passing every given filter; None disables a filter.

    niches and locations are lists of tags compared case-insensitively. A
    candidate passes the niche filter when any of its comma-separated niches
    is listed. Missing budgets and engagement rates count as 0.
    """

    wanted_niches = {n.strip().lower() for n in niches or [] if n.strip()}
    wanted_locations = {l.strip().lower() for l in locations or [] if l.strip()}

    kept = []
    for candidate in candidates:
        if wanted_niches and not _tags(candidate.get('niche')) & wanted_niches:
            continue
        if wanted_locations and (candidate.get('location') or '').strip().lower() not in wanted_locations:
            continue
        if max_budget is not None and _number(candidate.get('marketing_budget')) > max_budget:
            continue
        if min_engagement is not None and _number(candidate.get('engagement_rate')) < min_engagement:
            continue
        kept.append(candidate)

    return kept
