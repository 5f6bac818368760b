# notifications.py

import logging
from models import db, Notification
from errors import NotFound, PermissionDenied

logger = logging.getLogger(__name__)

COMPLETION_REMINDER = 'profile_completion'


def notify(profile_id, notification_type, title, message):
    """Queue a notification for a profile; caller commits"""
    notification = Notification(user_id=profile_id, type=notification_type, title=title, message=message)
    db.session.add(notification)
    logger.info(f"Notification '{notification_type}' queued for profile {profile_id}")
    return notification


def remind_incomplete_profile(profile, completion, threshold):
    """Store a single 'complete your profile' reminder while completion is low.

    Nothing is added when completion is at or above threshold, or when an
    unread reminder is already waiting. Returns the new notification or None.
    """

    if completion['percentage'] >= threshold:
        return None

    pending = Notification.query.filter_by(
        user_id=profile.id, type=COMPLETION_REMINDER, read=False
    ).first()
    if pending:
        return None

    return notify(
        profile.id,
        COMPLETION_REMINDER,
        'Complete Your Profile',
        f'Reach {threshold}%+ completion for better matches.'
    )


def latest_notifications(profile, limit):
    return Notification.query.filter_by(user_id=profile.id)\
        .order_by(Notification.created_at.desc(), Notification.id.desc())\
        .limit(limit).all()


def mark_read(profile, notification_id):
    notification = db.session.get(Notification, notification_id)
    if notification is None:
        raise NotFound('Notification not found')
    if notification.user_id != profile.id:
        raise PermissionDenied('Access denied')

    notification.read = True
    return notification
