# interactions.py

import logging
from models import db, Interaction, Match, Profile
from errors import NotFound, ValidationError
from matching import calculate_match
from messaging import get_or_create_conversation
from notifications import notify

logger = logging.getLogger(__name__)

INTERACTION_TYPES = ['like', 'superlike', 'pass']
POSITIVE = ('like', 'superlike')


def _liked(actor_id, target_id):
    return Interaction.query.filter(
        Interaction.actor_id == actor_id,
        Interaction.target_id == target_id,
        Interaction.type.in_(POSITIVE)
    ).first() is not None


def record_interaction(actor, target_id, interaction_type):
    """Record a swipe from actor on target_id.

    A like or superlike answered by an earlier like from the target turns into
    a Match, scored from the actor's point of view, plus a conversation. Returns
    a dict with the interaction and, when one was made, the match and conversation.
    """

    if interaction_type not in INTERACTION_TYPES:
        raise ValidationError(f"Interaction type must be one of: {', '.join(INTERACTION_TYPES)}")

    target = db.session.get(Profile, target_id)
    if target is None or target.id == actor.id:
        raise NotFound('Profile not found')
    if target.user_type == actor.user_type:
        raise ValidationError('Creators can only swipe on brands and brands on creators')

    interaction = Interaction(actor_id=actor.id, target_id=target.id, type=interaction_type)
    db.session.add(interaction)
    logger.info(f"Profile {actor.id} -> {interaction_type} -> profile {target.id}")

    result = {'interaction': interaction, 'match': None, 'conversation': None}

    if interaction_type not in POSITIVE or not _liked(target.id, actor.id):
        return result

    creator, brand = (actor, target) if actor.is_creator else (target, actor)

    match = Match.query.filter_by(creator_id=creator.id, brand_id=brand.id).first()
    if match is None:
        match = Match(
            creator_id=creator.id,
            brand_id=brand.id,
            match_score=calculate_match(actor.to_dict(), target.to_dict()),
            status='matched'
        )
        db.session.add(match)
        db.session.flush()

        for profile, other in ((actor, target), (target, actor)):
            notify(profile.id, 'match', "It's a Match!",
                   f"You and {other.full_name or other.handle or 'a new partner'} liked each other")

    conversation, _ = get_or_create_conversation(creator, brand, match)

    result['match'] = match
    result['conversation'] = conversation
    return result
