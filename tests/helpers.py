# tests/helpers.py
# Shared test helpers. Call the create_* helpers inside an app context.

from machinery_site import db
from machinery_site.catalog import CatalogStore
from machinery_site.models import User


def create_test_user(username="testuser", email=None, password="password", role="viewer"):
    """Adds a user to the test database and returns its id."""
    if email is None:
        email = f"{username}@example.test"
    user = db.session.scalar(db.select(User).filter((User.username == username) | (User.email == email)))
    if user:
        return user.id
    user = User(username=username, email=email, role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user.id


def login(client, username, password):
    return client.post('/auth/login', data=dict(username=username, password=password), follow_redirects=False)


def machinery_fields(**overrides):
    fields = {
        'name': 'Lathe 200',
        'category': 'Metalworking',
        'manufacturer': 'Okuma',
        'model_number': 'LB200',
        'year': 2012,
        'hours': 12000,
        'price': 12500,
        'location': 'Nagoya, Japan',
        'condition': 'Used - Good',
        'description': 'CNC lathe in good working order.',
    }
    fields.update(overrides)
    return fields


def create_machinery(**overrides):
    """Creates a catalog entry through the store and returns its identifier."""
    item = CatalogStore().create(machinery_fields(**overrides))
    return item.identifier
