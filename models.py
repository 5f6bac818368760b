from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


# Fields a user may edit on their own profile
PROFILE_FIELDS = [
    'full_name', 'handle', 'niche', 'location', 'follower_count',
    'engagement_rate', 'marketing_budget', 'bio', 'avatar_url', 'website', 'goal'
]


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    profile = db.relationship('Profile', back_populates='user', uselist=False)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)


class Profile(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), unique=True, nullable=False)
    user_type = db.Column(db.String(20), nullable=False)  # creator | brand
    full_name = db.Column(db.String(100))
    handle = db.Column(db.String(50))
    niche = db.Column(db.String(255))  # comma separated
    location = db.Column(db.String(120))
    follower_count = db.Column(db.Integer)
    engagement_rate = db.Column(db.Float)
    marketing_budget = db.Column(db.BigInteger)
    bio = db.Column(db.Text)
    avatar_url = db.Column(db.String(500))
    website = db.Column(db.String(500))
    goal = db.Column(db.String(255))
    profile_completed = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    user = db.relationship('User', back_populates='profile')

    @property
    def is_creator(self):
        return self.user_type == 'creator'

    def to_dict(self, include_email=False):
        data = {'id': self.id, 'user_type': self.user_type}
        for field in PROFILE_FIELDS:
            data[field] = getattr(self, field)
        data['profile_completed'] = bool(self.profile_completed)
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        if include_email and self.user is not None:
            data['email'] = self.user.email
        return data


class Match(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    creator_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    brand_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    match_score = db.Column(db.Integer, default=0)
    status = db.Column(db.String(20), default='matched')
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    creator = db.relationship('Profile', foreign_keys=[creator_id])
    brand = db.relationship('Profile', foreign_keys=[brand_id])

    __table_args__ = (db.UniqueConstraint('creator_id', 'brand_id'),)

    def to_dict(self):
        return {
            'id': self.id,
            'creator_id': self.creator_id,
            'brand_id': self.brand_id,
            'match_score': self.match_score,
            'status': self.status,
            'creator': self.creator.to_dict() if self.creator else None,
            'brand': self.brand.to_dict() if self.brand else None,
            'created_at': _iso(self.created_at)
        }


class SavedMatch(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    saved_profile_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (db.UniqueConstraint('user_id', 'saved_profile_id'),)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'saved_profile_id': self.saved_profile_id,
            'created_at': _iso(self.created_at)
        }


class CollaborationRequest(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    receiver_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    message = db.Column(db.Text)
    status = db.Column(db.String(20), default='pending')  # pending | accepted | declined
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'sender_id': self.sender_id,
            'receiver_id': self.receiver_id,
            'message': self.message,
            'status': self.status,
            'created_at': _iso(self.created_at)
        }


class Notification(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'read': bool(self.read),
            'created_at': _iso(self.created_at)
        }


class Campaign(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    creator_id = db.Column(db.Integer, db.ForeignKey('profile.id'))
    title = db.Column(db.String(100), nullable=False)
    budget = db.Column(db.BigInteger, nullable=False)
    deliverables = db.Column(db.Text, nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.String(20), default='proposed')
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    brand = db.relationship('Profile', foreign_keys=[brand_id])
    creator = db.relationship('Profile', foreign_keys=[creator_id])

    def to_dict(self):
        return {
            'id': self.id,
            'brand_id': self.brand_id,
            'creator_id': self.creator_id,
            'title': self.title,
            'budget': self.budget,
            'deliverables': self.deliverables,
            'start_date': _iso(self.start_date),
            'end_date': _iso(self.end_date),
            'status': self.status,
            'created_at': _iso(self.created_at)
        }


class Conversation(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    creator_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    brand_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    match_id = db.Column(db.Integer, db.ForeignKey('match.id'))
    last_message = db.Column(db.Text)
    last_message_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (db.UniqueConstraint('creator_id', 'brand_id'),)

    def has_participant(self, profile_id):
        return profile_id in (self.creator_id, self.brand_id)

    def to_dict(self):
        return {
            'id': self.id,
            'creator_id': self.creator_id,
            'brand_id': self.brand_id,
            'match_id': self.match_id,
            'last_message': self.last_message,
            'last_message_at': _iso(self.last_message_at),
            'created_at': _iso(self.created_at)
        }


class Message(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    conversation_id = db.Column(db.Integer, db.ForeignKey('conversation.id'), nullable=False)
    sender_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    read_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'conversation_id': self.conversation_id,
            'sender_id': self.sender_id,
            'content': self.content,
            'read_at': _iso(self.read_at),
            'created_at': _iso(self.created_at)
        }


class Interaction(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    actor_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    target_id = db.Column(db.Integer, db.ForeignKey('profile.id'), nullable=False)
    type = db.Column(db.String(20), nullable=False)  # like | superlike | pass
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'actor_id': self.actor_id,
            'target_id': self.target_id,
            'type': self.type,
            'created_at': _iso(self.created_at)
        }
