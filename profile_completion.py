# profile_completion.py

import logging

logger = logging.getLogger(__name__)

REMINDER_THRESHOLD = 70


def _present(profile, field):
    # None, '', 0 and 0.0 all count as missing
    return bool(profile.get(field))


def _length(profile, field):
    return len(profile.get(field) or '')


def _niche_count(profile):
    niche = profile.get('niche') or ''
    return len([part for part in niche.split(',') if part.strip()])


# (label, check, weight); creator weights add up to 100
CREATOR_CHECKLIST = [
    ('Email verified', lambda p: _present(p, 'email'), 11),
    ('Name and city', lambda p: _present(p, 'full_name') and _present(p, 'location'), 11),
    ('At least 2 niches', lambda p: _niche_count(p) >= 2, 11),
    ('Social handle', lambda p: _present(p, 'handle'), 11),
    ('Follower bracket', lambda p: _present(p, 'follower_count'), 11),
    ('Engagement rate', lambda p: _present(p, 'engagement_rate'), 11),
    # Media samples are not stored anywhere yet
    ('At least 1 media sample', lambda p: False, 11),
    ('Bio (120+ characters)', lambda p: _length(p, 'bio') >= 120, 11),
    ('Profile avatar', lambda p: _present(p, 'avatar_url'), 12),
]

# Brand weights add up to 100
BRAND_CHECKLIST = [
    ('Email verified', lambda p: _present(p, 'email'), 10),
    ('Name and website', lambda p: _present(p, 'full_name') and _present(p, 'website'), 10),
    ('Sector and niches', lambda p: _present(p, 'niche'), 10),
    ('Monthly marketing budget', lambda p: _present(p, 'marketing_budget'), 10),
    ('Target follower brackets', lambda p: _present(p, 'follower_count'), 10),
    ('City/location', lambda p: _present(p, 'location'), 10),
    ('Campaign objective', lambda p: _present(p, 'goal'), 10),
    ('Brief (60+ characters)', lambda p: _length(p, 'bio') >= 60, 10),
    ('At least 1 creative', lambda p: _present(p, 'avatar_url'), 10),
    ('Short bio', lambda p: _present(p, 'bio'), 10),
]


def checklist_for(user_type):
    """Creators get their own checklist, every other user_type is treated as a brand"""
    return CREATOR_CHECKLIST if user_type == 'creator' else BRAND_CHECKLIST


def compute_profile_completion(profile):
    """Compute the weighted completion percentage and checklist for a profile.

    Returns a dict with `percentage` (int 0-100) and `checklist`, a list of
    {'label', 'completed', 'weight'} dicts in display order.
    """

    checklist = []
    for label, check, weight in checklist_for(profile.get('user_type')):
        checklist.append({
            'label': label,
            'completed': bool(check(profile)),
            'weight': weight
        })

    total_points = sum(item['weight'] for item in checklist if item['completed'])
    percentage = int(round(total_points))

    logger.debug("Profile completion for %s: %d%%", profile.get('user_type'), percentage)

    return {
        'percentage': percentage,
        'checklist': checklist
    }


def needs_completion_reminder(completion, threshold=REMINDER_THRESHOLD):
    """True when the profile is below the reminder threshold"""
    return completion['percentage'] < threshold
