# messaging.py

import logging
from models import db, Conversation, Message, utcnow
from errors import NotFound, PermissionDenied, ValidationError

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 5000


def get_or_create_conversation(creator, brand, match=None):
    """Return the creator/brand conversation, creating it on first contact.

    The second item of the returned tuple is True when a conversation was created.
    """

    conversation = Conversation.query.filter_by(creator_id=creator.id, brand_id=brand.id).first()
    if conversation:
        if match is not None and conversation.match_id is None:
            conversation.match_id = match.id
        return conversation, False

    conversation = Conversation(
        creator_id=creator.id,
        brand_id=brand.id,
        match_id=match.id if match is not None else None,
        last_message_at=utcnow()
    )
    db.session.add(conversation)
    db.session.flush()
    logger.info(f"Conversation {conversation.id} opened between creator {creator.id} and brand {brand.id}")
    return conversation, True


def conversations_for(profile):
    return Conversation.query.filter(
        (Conversation.creator_id == profile.id) | (Conversation.brand_id == profile.id)
    ).order_by(Conversation.last_message_at.desc(), Conversation.id.desc()).all()


def get_conversation(profile, conversation_id):
    conversation = db.session.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFound('Conversation not found')
    if not conversation.has_participant(profile.id):
        raise PermissionDenied('Access denied')
    return conversation


def send_message(conversation, sender, content):
    if not isinstance(content, str) or not content.strip():
        raise ValidationError('Message cannot be empty')
    content = content.strip()
    if len(content) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f'Message must be at most {MAX_MESSAGE_LENGTH} characters')

    message = Message(conversation_id=conversation.id, sender_id=sender.id, content=content)
    db.session.add(message)

    conversation.last_message = content
    conversation.last_message_at = utcnow()
    return message


def read_messages(conversation, reader):
    """Return the conversation's messages oldest first, marking the other side's as read"""

    messages = Message.query.filter_by(conversation_id=conversation.id)\
        .order_by(Message.created_at.asc(), Message.id.asc()).all()

    now = utcnow()
    for message in messages:
        if message.sender_id != reader.id and message.read_at is None:
            message.read_at = now

    return messages


def unread_counts(profile):
    """Unread messages sent to profile, as (total, {conversation_id: count})"""

    by_conversation = {}
    total = 0
    for conversation in conversations_for(profile):
        count = Message.query.filter(
            Message.conversation_id == conversation.id,
            Message.sender_id != profile.id,
            Message.read_at.is_(None)
        ).count()
        by_conversation[conversation.id] = count
        total += count

    return total, by_conversation
