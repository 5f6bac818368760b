# campaigns.py

import logging
from datetime import timezone
from models import db, Campaign, Profile
from errors import ValidationError, PermissionDenied, NotFound, InvalidTransition
from notifications import notify
from validation import validate_campaign, parse_date, is_int

logger = logging.getLogger(__name__)

STATUSES = ['proposed', 'accepted', 'rejected', 'completed']

# status -> statuses it may move to
TRANSITIONS = {
    'proposed': {'accepted', 'rejected'},
    'accepted': {'completed'},
    'rejected': set(),
    'completed': set()
}


def _naive(value):
    # Stored as naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _move(campaign, status):
    allowed = TRANSITIONS.get(campaign.status, set())
    if status not in allowed:
        raise InvalidTransition(
            f"Campaign {campaign.id} cannot move from '{campaign.status}' to '{status}'"
        )
    logger.info(f"Campaign {campaign.id}: {campaign.status} -> {status}")
    campaign.status = status


def create_campaign(brand, data):
    """Create a proposed campaign owned by brand, optionally offered to one creator"""

    if brand.is_creator:
        raise PermissionDenied('Only brands can create campaigns')

    errors = validate_campaign(data)
    if errors:
        raise ValidationError('Invalid campaign', errors)

    creator_id = data.get('creator_id')
    if creator_id is not None:
        if not is_int(creator_id):
            raise ValidationError("Field 'creator_id' must be a profile id")
        creator = db.session.get(Profile, creator_id)
        if creator is None or not creator.is_creator:
            raise NotFound('Creator not found')

    campaign = Campaign(
        brand_id=brand.id,
        creator_id=creator_id,
        title=data['title'].strip(),
        budget=data['budget'],
        deliverables=data['deliverables'].strip(),
        start_date=_naive(parse_date(data['start_date'])),
        end_date=_naive(parse_date(data['end_date'])),
        status='proposed'
    )
    db.session.add(campaign)
    db.session.flush()

    if creator_id is not None:
        notify(creator_id, 'campaign_proposed', 'New Campaign Offer',
               f"{brand.full_name or 'A brand'} offered you '{campaign.title}'")

    return campaign


def _check_creator(campaign, profile):
    if not profile.is_creator:
        raise PermissionDenied('Only creators can respond to campaign offers')
    if campaign.creator_id is not None and campaign.creator_id != profile.id:
        raise PermissionDenied('This campaign was offered to another creator')


def accept_campaign(campaign, profile):
    _check_creator(campaign, profile)
    _move(campaign, 'accepted')
    campaign.creator_id = profile.id
    notify(campaign.brand_id, 'campaign_accepted', 'Campaign Accepted',
           f"{profile.full_name or 'A creator'} accepted '{campaign.title}'")
    return campaign


def reject_campaign(campaign, profile):
    _check_creator(campaign, profile)
    _move(campaign, 'rejected')
    notify(campaign.brand_id, 'campaign_rejected', 'Campaign Rejected',
           f"{profile.full_name or 'A creator'} rejected '{campaign.title}'")
    return campaign


def complete_campaign(campaign, profile):
    if campaign.brand_id != profile.id:
        raise PermissionDenied('Only the brand that owns this campaign can complete it')
    _move(campaign, 'completed')
    if campaign.creator_id is not None:
        notify(campaign.creator_id, 'campaign_completed', 'Campaign Completed',
               f"'{campaign.title}' has been marked as completed")
    return campaign


def can_view(campaign, profile):
    # Open offers (no creator yet) are visible to every creator
    if profile.id in (campaign.brand_id, campaign.creator_id):
        return True
    return profile.is_creator and campaign.creator_id is None and campaign.status == 'proposed'


def campaigns_for(profile, status=None):
    if profile.is_creator:
        query = Campaign.query.filter(
            (Campaign.creator_id == profile.id) |
            ((Campaign.creator_id.is_(None)) & (Campaign.status == 'proposed'))
        )
    else:
        query = Campaign.query.filter(Campaign.brand_id == profile.id)

    if status:
        if status not in STATUSES:
            raise ValidationError(f"Unknown campaign status '{status}'")
        query = query.filter(Campaign.status == status)

    return query.order_by(Campaign.created_at.desc(), Campaign.id.desc()).all()
