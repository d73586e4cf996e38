import uuid
from datetime import datetime, timezone
from flask import current_app
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from machinery_site import db
from machinery_site.permissions import permissions_for_role


def _utcnow():
    return datetime.now(timezone.utc)


def new_identifier():
    """24 lowercase hex characters, the same shape as the legacy catalog ids."""
    return uuid.uuid4().hex[:24]


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    password_hash = db.Column(db.String(255))
    role = db.Column(db.String(20), nullable=False, default='viewer')
    is_active_account = db.Column(db.Boolean, nullable=False, default=True)
    last_login = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=_utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_active(self):
        return self.is_active_account

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def permissions(self):
        return sorted(permissions_for_role(self.role))

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role,
            'isActive': self.is_active_account,
            'lastLogin': self.last_login.isoformat() if self.last_login else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'


class Category(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    description = db.Column(db.Text)
    image = db.Column(db.String(255))
    parent_id = db.Column(db.Integer, db.ForeignKey('category.id'), nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'image': self.image,
            'parentId': self.parent_id,
            'order': self.order,
            'isActive': self.is_active,
        }

    def __repr__(self):
        return f'<Category {self.slug}>'


class MachineryItem(db.Model):
    __tablename__ = 'machinery_item'

    id = db.Column(db.Integer, primary_key=True)
    identifier = db.Column(db.String(24), unique=True, nullable=False, index=True, default=new_identifier)
    name = db.Column(db.String(200), nullable=False)
    # Unique across all entries; enforced by the database, not by the app
    slug = db.Column(db.String(220), unique=True, nullable=False)
    category = db.Column(db.String(100))
    category_slug = db.Column(db.String(120), nullable=False, index=True)
    subcategory = db.Column(db.String(100))
    manufacturer = db.Column(db.String(100), nullable=False)
    model_number = db.Column(db.String(100), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    hours = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Float, nullable=False, default=0)
    price_formatted = db.Column(db.String(40))
    price_jpy = db.Column(db.String(40))
    location = db.Column(db.String(120), nullable=False)
    condition = db.Column(db.String(60), nullable=False)
    weight = db.Column(db.String(60))
    featured = db.Column(db.Boolean, nullable=False, default=False)
    availability = db.Column(db.String(40), nullable=False, default='available')
    description = db.Column(db.Text, nullable=False)
    specifications = db.Column(db.JSON, nullable=False, default=dict)
    images = db.Column(db.JSON, nullable=False, default=list)
    tags = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def canonical_path(self, lang=None):
        from machinery_site.catalog.paths import FALLBACK_CATEGORY_SLUG, canonical_path
        if lang is None:
            lang = current_app.config.get('DEFAULT_LANGUAGE', 'en')
        return canonical_path(
            lang,
            self.category_slug or FALLBACK_CATEGORY_SLUG,
            self.slug or self.identifier,
        )

    def to_dict(self, lang=None):
        return {
            'id': self.identifier,
            'name': self.name,
            'slug': self.slug,
            'category': self.category,
            'categorySlug': self.category_slug,
            'subcategory': self.subcategory,
            'manufacturer': self.manufacturer,
            'modelNumber': self.model_number,
            'year': self.year,
            'hours': self.hours,
            'price': self.price,
            'priceFormatted': self.price_formatted,
            'priceJPY': self.price_jpy,
            'location': self.location,
            'condition': self.condition,
            'weight': self.weight,
            'featured': self.featured,
            'availability': self.availability,
            'description': self.description,
            'specifications': self.specifications or {},
            'images': self.images or [],
            'tags': self.tags or [],
            'canonicalPath': self.canonical_path(lang),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<MachineryItem {self.identifier} {self.slug}>'


def _localized(en, ja):
    if en is None and ja is None:
        return None
    return {'en': en or '', 'ja': ja or ''}


class Brand(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    logo = db.Column(db.String(255), nullable=False)
    order = db.Column(db.Integer, nullable=False, default=0, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'logo': self.logo,
            'order': self.order,
            'isActive': self.is_active,
        }

    def __repr__(self):
        return f'<Brand {self.name}>'


class PageContent(db.Model):
    """A page assembled from ordered content blocks, with en/ja text."""
    __tablename__ = 'page_content'

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    title_en = db.Column(db.String(200), nullable=False)
    title_ja = db.Column(db.String(200), nullable=False)
    description_en = db.Column(db.Text)
    description_ja = db.Column(db.Text)
    blocks = db.Column(db.JSON, nullable=False, default=list)
    is_published = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'slug': self.slug,
            'title': _localized(self.title_en, self.title_ja),
            'description': _localized(self.description_en, self.description_ja),
            'blocks': sorted(self.blocks or [], key=lambda block: block.get('order', 0)),
            'isPublished': self.is_published,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<PageContent {self.slug}>'


class UserActivity(db.Model):
    __tablename__ = 'user_activity'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    action = db.Column(db.String(40), nullable=False, index=True)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64), index=True)
    user_agent = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=_utcnow, index=True)
    user = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'username': self.user.username if self.user else None,
            'action': self.action,
            'details': self.details,
            'ipAddress': self.ip_address,
            'userAgent': self.user_agent,
            'timestamp': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<UserActivity {self.action} by {self.user_id}>'


class SellBuyInquiry(db.Model):
    __tablename__ = 'sell_buy_inquiry'

    id = db.Column(db.Integer, primary_key=True)
    form_type = db.Column(db.String(10), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(40), nullable=False)
    company = db.Column(db.String(120))
    machine_type = db.Column(db.String(120), nullable=False)
    machine_make = db.Column(db.String(120))
    machine_model = db.Column(db.String(120))
    machine_year = db.Column(db.String(10))
    machine_condition = db.Column(db.String(60))
    budget = db.Column(db.String(60))
    timeline = db.Column(db.String(60))
    additional_info = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    submitted_at = db.Column(db.DateTime, default=_utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.form_type,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'company': self.company,
            'machineType': self.machine_type,
            'machineMake': self.machine_make,
            'machineModel': self.machine_model,
            'machineYear': self.machine_year,
            'machineCondition': self.machine_condition,
            'budget': self.budget,
            'timeline': self.timeline,
            'additionalInfo': self.additional_info,
            'submittedAt': self.submitted_at.isoformat() if self.submitted_at else None,
        }

    def __repr__(self):
        return f'<SellBuyInquiry {self.form_type} {self.email}>'
