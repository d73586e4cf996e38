from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, IntegerField, FloatField, BooleanField, SelectField, PasswordField
from wtforms.validators import DataRequired, Email, Length, NumberRange, Optional, AnyOf, ValidationError
from machinery_site.models import User
from machinery_site.permissions import ROLE_NAMES
from machinery_site import db

AVAILABILITY_CHOICES = ('available', 'reserved', 'sold')


class ApiForm(FlaskForm):
    """Base for forms fed from JSON request bodies; session auth guards these."""
    class Meta:
        csrf = False


class MachineryItemForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    slug = StringField('Slug', validators=[Optional(), Length(max=220)])
    category = StringField('Category', validators=[DataRequired(), Length(max=100)])
    subcategory = StringField('Subcategory', validators=[Optional(), Length(max=100)])
    manufacturer = StringField('Manufacturer', validators=[DataRequired(), Length(max=100)])
    model_number = StringField('Model Number', validators=[DataRequired(), Length(max=100)])
    year = IntegerField('Year', validators=[DataRequired(), NumberRange(min=1900, max=2100)])
    hours = IntegerField('Hours', validators=[Optional(), NumberRange(min=0)], default=0)
    price = FloatField('Price', validators=[Optional(), NumberRange(min=0)], default=0)
    location = StringField('Location', validators=[DataRequired(), Length(max=120)])
    condition = StringField('Condition', validators=[DataRequired(), Length(max=60)])
    weight = StringField('Weight', validators=[Optional(), Length(max=60)])
    featured = BooleanField('Featured')
    availability = StringField('Availability', validators=[Optional(), AnyOf(AVAILABILITY_CHOICES)], default='available')
    description = TextAreaField('Description', validators=[DataRequired()])


class CategoryForm(ApiForm):
    name = StringField('Category Name', validators=[DataRequired(), Length(min=2, max=100)])
    description = TextAreaField('Description', validators=[Optional()])
    image = StringField('Image URL', validators=[Optional(), Length(max=255)])
    parent_id = IntegerField('Parent Category', validators=[Optional()])
    order = IntegerField('Order', validators=[Optional()], default=0)
    is_active = BooleanField('Active', default=True)


def validate_unique_username(form, field):
    if db.session.scalar(db.select(User).filter_by(username=field.data)):
        raise ValidationError('Username already taken.')

def validate_unique_email(form, field):
    if db.session.scalar(db.select(User).filter_by(email=field.data)):
        raise ValidationError('Email already registered.')


class UserCreateForm(ApiForm):
    username = StringField('Username', validators=[DataRequired(), Length(min=3, max=80), validate_unique_username])
    email = StringField('Email', validators=[DataRequired(), Email(), validate_unique_email])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=8)])
    role = SelectField('Role', choices=[(r, r.title()) for r in ROLE_NAMES], validators=[DataRequired()])


class BrandForm(ApiForm):
    name = StringField('Brand Name', validators=[DataRequired(), Length(max=100)])
    logo = StringField('Logo URL', validators=[DataRequired(), Length(max=255)])
    order = IntegerField('Order', validators=[Optional(), NumberRange(min=0)])
    is_active = BooleanField('Active', default=True)


class PageContentForm(ApiForm):
    slug = StringField('Slug', validators=[Optional(), Length(max=120)])
    title_en = StringField('Title (English)', validators=[DataRequired(), Length(max=200)])
    title_ja = StringField('Title (Japanese)', validators=[DataRequired(), Length(max=200)])
    description_en = TextAreaField('Description (English)', validators=[Optional()])
    description_ja = TextAreaField('Description (Japanese)', validators=[Optional()])
    is_published = BooleanField('Published')


INQUIRY_TYPES = ('sell', 'buy')


class SellBuyInquiryForm(ApiForm):
    form_type = StringField('Form Type', validators=[DataRequired(), AnyOf(INQUIRY_TYPES)])
    name = StringField('Name', validators=[DataRequired(), Length(max=120)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    phone = StringField('Phone', validators=[DataRequired(), Length(max=40)])
    company = StringField('Company', validators=[Optional(), Length(max=120)])
    machine_type = StringField('Machine Type', validators=[DataRequired(), Length(max=120)])
    machine_make = StringField('Make', validators=[Optional(), Length(max=120)])
    machine_model = StringField('Model', validators=[Optional(), Length(max=120)])
    machine_year = StringField('Year', validators=[Optional(), Length(max=10)])
    machine_condition = StringField('Condition', validators=[Optional(), Length(max=60)])
    budget = StringField('Budget', validators=[Optional(), Length(max=60)])
    timeline = StringField('Timeline', validators=[Optional(), Length(max=60)])
    additional_info = TextAreaField('Additional Information', validators=[Optional(), Length(max=5000)])
