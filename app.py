import os
import logging
from flask import Flask, request, jsonify
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from config import Config
from logger import configure_logging
from models import (
    db, User, Profile, Match, SavedMatch, CollaborationRequest, Campaign, Interaction,
    PROFILE_FIELDS
)
from errors import (
    register_error_handlers, ValidationError, AuthenticationFailed,
    PermissionDenied, NotFound, InvalidTransition
)
from validation import validate_signup, validate_profile_update, is_int
from matching import rank_candidates, filter_candidates
from profile_completion import compute_profile_completion, needs_completion_reminder
from notifications import notify, remind_incomplete_profile, latest_notifications, mark_read
from campaigns import (
    create_campaign, accept_campaign, reject_campaign, complete_campaign,
    can_view, campaigns_for
)
from messaging import (
    get_or_create_conversation, conversations_for, get_conversation,
    send_message, read_messages, unread_counts
)
from interactions import record_interaction

configure_logging(Config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize
app = Flask(__name__)
app.config.from_object(Config)

db.init_app(app)
register_error_handlers(app)

login_manager = LoginManager()
login_manager.init_app(app)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    raise AuthenticationFailed('Login required')


# Helpers

def get_payload():
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def get_current_profile():
    profile = current_user.profile
    if profile is None:
        raise NotFound('Profile not found')
    return profile


def get_profile_or_404(profile_id):
    profile = db.session.get(Profile, profile_id)
    if profile is None:
        raise NotFound('Profile not found')
    return profile


def get_completion(profile):
    # Email comes from the account, not the profile row
    return compute_profile_completion(profile.to_dict(include_email=True))


def find_recommended(profile, limit=None):
    """Score every profile of the opposite type against profile"""

    target_type = 'brand' if profile.is_creator else 'creator'
    candidates = Profile.query.filter(Profile.user_type == target_type, Profile.id != profile.id)\
        .order_by(Profile.id).all()

    return rank_candidates(
        profile.to_dict(),
        [c.to_dict() for c in candidates],
        limit=limit or app.config['MATCH_LIMIT']
    )


def get_list_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    return [part.strip() for part in value.split(',') if part.strip()] or None


def get_number_arg(name):
    value = request.args.get(name)
    if value is None or value == '':
        return None
    try:
        number = float(value)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be a number")
    if number != number or number < 0:
        raise ValidationError(f"Query parameter '{name}' must be a non-negative number")
    return number


def get_int_arg(name, default, maximum):
    value = request.args.get(name)
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be an integer")
    if not 1 <= number <= maximum:
        raise ValidationError(f"Query parameter '{name}' must be between 1 and {maximum}")
    return number


def find_feed(profile, filters, page, per_page):
    """Swipe deck: unseen opposite-type profiles, filtered, best scores first.

    Returns (candidates on this page, total matching candidates).
    """

    target_type = 'brand' if profile.is_creator else 'creator'
    swiped = db.select(Interaction.target_id).where(Interaction.actor_id == profile.id)

    candidates = Profile.query.filter(
        Profile.user_type == target_type,
        Profile.id != profile.id,
        Profile.id.notin_(swiped)
    ).order_by(Profile.id).all()

    kept = filter_candidates([c.to_dict() for c in candidates], **filters)
    ranked = rank_candidates(profile.to_dict(), kept, limit=len(kept))

    start = (page - 1) * per_page
    return ranked[start:start + per_page], len(ranked)


# Auth

@app.route('/signup', methods=['POST'])
def signup():
    data = get_payload()

    errors = validate_signup(data) + validate_profile_update(
        {f: data.get(f) for f in ('follower_count', 'marketing_budget')}
    )
    if errors:
        raise ValidationError('Invalid signup', errors)

    email = data['email'].strip().lower()
    if User.query.filter_by(email=email).first():
        raise ValidationError('Email already registered')

    user = User(email=email)
    user.set_password(data['password'])
    db.session.add(user)
    db.session.flush()

    profile = Profile(
        user_id=user.id,
        user_type=data['user_type'],
        full_name=(data.get('full_name') or '').strip() or None,
        handle=(data.get('handle') or '').strip() or None,
        follower_count=data.get('follower_count'),
        marketing_budget=data.get('marketing_budget')
    )
    db.session.add(profile)
    db.session.commit()

    login_user(user)
    logger.info(f"New {profile.user_type} signed up: {email}")

    return jsonify({'profile': profile.to_dict(include_email=True)}), 201


@app.route('/login', methods=['POST'])
def login():
    data = get_payload()
    email = str(data.get('email') or '').strip().lower()

    user = User.query.filter_by(email=email).first()

    if user and user.check_password(str(data.get('password') or '')):
        login_user(user)
        return jsonify({'profile': user.profile.to_dict(include_email=True) if user.profile else None})

    logger.warning(f"Failed login for {email}")
    raise AuthenticationFailed('Invalid credentials')


@app.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})


# Profile

@app.route('/profile', methods=['GET'])
@login_required
def get_profile():
    profile = get_current_profile()
    return jsonify({
        'profile': profile.to_dict(include_email=True),
        'completion': get_completion(profile)
    })


@app.route('/profile', methods=['POST'])
@login_required
def update_profile():
    profile = get_current_profile()
    data = get_payload()

    errors = validate_profile_update(data)
    if errors:
        raise ValidationError('Invalid profile', errors)

    for field in PROFILE_FIELDS:
        if field in data:
            value = data[field]
            if isinstance(value, str):
                value = value.strip() or None
            setattr(profile, field, value)

    # Recalculate completion
    completion = get_completion(profile)
    profile.profile_completed = completion['percentage'] >= app.config['COMPLETION_REMINDER_THRESHOLD']
    db.session.commit()

    return jsonify({
        'profile': profile.to_dict(include_email=True),
        'completion': completion
    })


@app.route('/profiles/<int:profile_id>')
@login_required
def view_profile(profile_id):
    profile = get_profile_or_404(profile_id)
    return jsonify({'profile': profile.to_dict()})


# Dashboard

@app.route('/dashboard')
@login_required
def dashboard():
    profile = get_current_profile()
    config = app.config

    completion = get_completion(profile)
    threshold = config['COMPLETION_REMINDER_THRESHOLD']
    if needs_completion_reminder(completion, threshold):
        remind_incomplete_profile(profile, completion, threshold)
        db.session.commit()

    matches = Match.query.filter(
        (Match.creator_id == profile.id) | (Match.brand_id == profile.id)
    ).order_by(Match.match_score.desc()).limit(config['DASHBOARD_MATCHES']).all()

    average_score = None
    if matches:
        average_score = round(sum(m.match_score for m in matches) / len(matches))

    saved = SavedMatch.query.filter_by(user_id=profile.id).all()

    requests = CollaborationRequest.query.filter(
        (CollaborationRequest.sender_id == profile.id) |
        (CollaborationRequest.receiver_id == profile.id)
    ).order_by(CollaborationRequest.created_at.desc(), CollaborationRequest.id.desc()).all()

    return jsonify({
        'profile': profile.to_dict(include_email=True),
        'completion': completion,
        'show_completion_reminder': needs_completion_reminder(completion, threshold),
        'matches': [m.to_dict() for m in matches],
        'average_match_score': average_score,
        'recommended': find_recommended(profile),
        'saved_profile_ids': [s.saved_profile_id for s in saved],
        'notifications': [n.to_dict() for n in latest_notifications(profile, config['DASHBOARD_NOTIFICATIONS'])],
        'collab_requests': [r.to_dict() for r in requests]
    })


# Matching

@app.route('/matches/recommended')
@login_required
def recommended_matches():
    profile = get_current_profile()
    return jsonify({'recommended': find_recommended(profile)})


@app.route('/matches/feed')
@login_required
def match_feed():
    profile = get_current_profile()

    filters = {
        'niches': get_list_arg('niches'),
        'locations': get_list_arg('locations'),
        'max_budget': get_number_arg('max_budget'),
        'min_engagement': get_number_arg('min_engagement')
    }
    page = get_int_arg('page', 1, 10000)
    per_page = get_int_arg('per_page', app.config['FEED_PAGE_SIZE'], app.config['FEED_MAX_PAGE_SIZE'])

    candidates, total = find_feed(profile, filters, page, per_page)

    return jsonify({
        'candidates': candidates,
        'page': page,
        'per_page': per_page,
        'total': total,
        'has_more': page * per_page < total
    })


@app.route('/saved/<int:profile_id>', methods=['POST'])
@login_required
def toggle_saved(profile_id):
    profile = get_current_profile()
    get_profile_or_404(profile_id)

    saved = SavedMatch.query.filter_by(user_id=profile.id, saved_profile_id=profile_id).first()
    if saved:
        db.session.delete(saved)
        is_saved = False
    else:
        db.session.add(SavedMatch(user_id=profile.id, saved_profile_id=profile_id))
        is_saved = True
    db.session.commit()

    return jsonify({'saved_profile_id': profile_id, 'saved': is_saved})


@app.route('/interactions', methods=['POST'])
@login_required
def create_interaction():
    profile = get_current_profile()
    data = get_payload()

    target_id = data.get('target_id')
    if not is_int(target_id):
        raise ValidationError("Field 'target_id' must be a profile id")

    result = record_interaction(profile, target_id, data.get('type'))
    db.session.commit()

    return jsonify({
        'interaction': result['interaction'].to_dict(),
        'match': result['match'].to_dict() if result['match'] else None,
        'conversation': result['conversation'].to_dict() if result['conversation'] else None
    }), 201


# Collaboration requests

@app.route('/collab-requests', methods=['POST'])
@login_required
def send_collab_request():
    profile = get_current_profile()
    data = get_payload()

    receiver_id = data.get('receiver_id')
    if not is_int(receiver_id):
        raise ValidationError("Field 'receiver_id' must be a profile id")
    receiver = get_profile_or_404(receiver_id)
    if receiver.id == profile.id:
        raise ValidationError('You cannot send a request to yourself')

    collab = CollaborationRequest(
        sender_id=profile.id,
        receiver_id=receiver.id,
        message=data.get('message') or "I'd love to collaborate with you!"
    )
    db.session.add(collab)

    # Create notification for receiver
    notify(receiver.id, 'collab_request', 'New Collaboration Request',
           f"{profile.full_name or profile.handle or 'Someone'} sent you a collaboration request")
    db.session.commit()

    return jsonify({'collab_request': collab.to_dict()}), 201


@app.route('/collab-requests/<int:request_id>/respond', methods=['POST'])
@login_required
def respond_collab_request(request_id):
    profile = get_current_profile()
    data = get_payload()

    collab = db.session.get(CollaborationRequest, request_id)
    if collab is None:
        raise NotFound('Collaboration request not found')
    if collab.receiver_id != profile.id:
        raise PermissionDenied('Access denied')

    action = data.get('action')
    if action not in ('accept', 'decline'):
        raise ValidationError("Field 'action' must be 'accept' or 'decline'")
    if collab.status != 'pending':
        raise InvalidTransition(f"Request already {collab.status}")

    collab.status = 'accepted' if action == 'accept' else 'declined'

    conversation = None
    sender = get_profile_or_404(collab.sender_id)
    if collab.status == 'accepted' and sender.user_type != profile.user_type:
        creator, brand = (profile, sender) if profile.is_creator else (sender, profile)
        conversation, _ = get_or_create_conversation(creator, brand)

    notify(sender.id, f'collab_{collab.status}', f'Collaboration Request {collab.status.title()}',
           f"{profile.full_name or profile.handle or 'Someone'} {collab.status} your collaboration request")
    db.session.commit()

    return jsonify({
        'collab_request': collab.to_dict(),
        'conversation': conversation.to_dict() if conversation else None
    })


# Campaigns

def get_campaign_or_404(campaign_id, profile):
    campaign = db.session.get(Campaign, campaign_id)
    if campaign is None:
        raise NotFound('Campaign not found')
    if not can_view(campaign, profile):
        raise PermissionDenied('Access denied')
    return campaign


@app.route('/campaigns', methods=['GET'])
@login_required
def list_campaigns():
    profile = get_current_profile()
    campaigns = campaigns_for(profile, request.args.get('status'))
    return jsonify({'campaigns': [c.to_dict() for c in campaigns]})


@app.route('/campaigns', methods=['POST'])
@login_required
def new_campaign():
    profile = get_current_profile()
    campaign = create_campaign(profile, get_payload())
    db.session.commit()
    return jsonify({'campaign': campaign.to_dict()}), 201


@app.route('/campaigns/<int:campaign_id>')
@login_required
def campaign_detail(campaign_id):
    profile = get_current_profile()
    campaign = get_campaign_or_404(campaign_id, profile)

    return jsonify({
        'campaign': campaign.to_dict(),
        'brand': campaign.brand.to_dict(),
        'creator': campaign.creator.to_dict() if campaign.creator else None
    })


CAMPAIGN_ACTIONS = {
    'accept': accept_campaign,
    'reject': reject_campaign,
    'complete': complete_campaign
}


@app.route('/campaigns/<int:campaign_id>/<string:action>', methods=['POST'])
@login_required
def campaign_action(campaign_id, action):
    if action not in CAMPAIGN_ACTIONS:
        raise NotFound(f"Unknown campaign action '{action}'")

    profile = get_current_profile()
    campaign = get_campaign_or_404(campaign_id, profile)

    CAMPAIGN_ACTIONS[action](campaign, profile)
    db.session.commit()

    return jsonify({'campaign': campaign.to_dict()})


# Messages

@app.route('/conversations')
@login_required
def list_conversations():
    profile = get_current_profile()
    total, by_conversation = unread_counts(profile)

    conversations = []
    for conversation in conversations_for(profile):
        item = conversation.to_dict()
        item['unread'] = by_conversation.get(conversation.id, 0)
        conversations.append(item)

    return jsonify({'conversations': conversations, 'total_unread': total})


@app.route('/conversations/<int:conversation_id>/messages', methods=['GET'])
@login_required
def list_messages(conversation_id):
    profile = get_current_profile()
    conversation = get_conversation(profile, conversation_id)

    messages = read_messages(conversation, profile)
    db.session.commit()

    return jsonify({'messages': [m.to_dict() for m in messages]})


@app.route('/conversations/<int:conversation_id>/messages', methods=['POST'])
@login_required
def post_message(conversation_id):
    profile = get_current_profile()
    conversation = get_conversation(profile, conversation_id)

    message = send_message(conversation, profile, get_payload().get('content'))
    db.session.commit()

    return jsonify({'message': message.to_dict()}), 201


@app.route('/messages/unread')
@login_required
def unread_messages():
    profile = get_current_profile()
    total, by_conversation = unread_counts(profile)
    return jsonify({
        'total': total,
        'by_conversation': {str(k): v for k, v in by_conversation.items()}
    })


# Notifications

@app.route('/notifications')
@login_required
def list_notifications():
    profile = get_current_profile()
    notifications = latest_notifications(profile, app.config['DASHBOARD_NOTIFICATIONS'])
    return jsonify({'notifications': [n.to_dict() for n in notifications]})


@app.route('/notifications/<int:notification_id>/read', methods=['POST'])
@login_required
def read_notification(notification_id):
    profile = get_current_profile()
    notification = mark_read(profile, notification_id)
    db.session.commit()
    return jsonify({'notification': notification.to_dict()})


# Initialize database
with app.app_context():
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
        os.makedirs(os.path.dirname(Config.DB_PATH), exist_ok=True)
    db.create_all()

if __name__ == '__main__':
    app.run(debug=True, port=5000)
