# seed.py
# Populates a fresh database with an admin account, categories and demo listings.

import os
from machinery_site import db, create_app
from machinery_site.catalog import CatalogStore, CategoryStore
from machinery_site.content import BrandStore, PageStore
from machinery_site.exceptions import DuplicateSlug
from machinery_site.models import Brand, Category, PageContent, User

app = create_app()

CATEGORIES = [
    'Excavators', 'Wheel Loaders', 'Forklifts', 'Cranes',
    'Metalworking', 'Agricultural Machinery', 'Generators',
]

DEMO_MACHINERY = [
    {
        'name': 'Komatsu PC200-8 Excavator',
        'category': 'Excavators',
        'manufacturer': 'Komatsu',
        'model_number': 'PC200-8',
        'year': 2015,
        'hours': 6400,
        'price': 58000,
        'location': 'Yokohama, Japan',
        'condition': 'Used - Good',
        'featured': True,
        'description': 'Well maintained 20 ton class hydraulic excavator.',
        'specifications': {'Operating weight': '19,900 kg', 'Bucket capacity': '0.8 m3'},
    },
    {
        'name': 'Okuma LB3000 EX Lathe',
        'category': 'Metalworking',
        'manufacturer': 'Okuma',
        'model_number': 'LB3000 EX',
        'year': 2012,
        'hours': 21000,
        'price': 42000,
        'location': 'Nagoya, Japan',
        'condition': 'Used - Excellent',
        'featured': False,
        'description': 'CNC turning center with OSP-P200L control.',
        'specifications': {'Max turning diameter': '370 mm'},
    },
]

BRANDS = [
    ('Komatsu', '/static/brands/komatsu.png'),
    ('Hitachi', '/static/brands/hitachi.png'),
    ('Okuma', '/static/brands/okuma.png'),
    ('Tadano', '/static/brands/tadano.png'),
]

HOME_PAGE = {
    'title_en': 'Home',
    'title_ja': 'ホーム',
    'is_published': True,
}

HOME_BLOCKS = [
    {
        'type': 'hero',
        'title': {'en': 'Quality used machinery from Japan', 'ja': '日本の高品質中古機械'},
        'buttonText': {'en': 'Browse catalog', 'ja': 'カタログを見る'},
        'link': '/en/catalog',
    },
]

def seed_admin_user():
    if not db.session.scalar(db.select(User).filter_by(username='admin')):
        admin = User(username='admin', email='admin@example.com', role='admin')
        admin.set_password(os.environ.get('ADMIN_PASSWORD', 'admin12345'))
        db.session.add(admin)
        db.session.commit()
        print("Default admin user created: username=admin")

def seed_categories():
    store = CategoryStore()
    for order, name in enumerate(CATEGORIES):
        if not db.session.scalar(db.select(Category).filter_by(name=name)):
            store.create({'name': name, 'order': order})

def seed_brands():
    store = BrandStore()
    for name, logo in BRANDS:
        if not db.session.scalar(db.select(Brand).filter_by(name=name)):
            store.create({'name': name, 'logo': logo, 'is_active': True})

def seed_pages():
    if not db.session.scalar(db.select(PageContent).filter_by(slug='home')):
        PageStore().create(HOME_PAGE, blocks=HOME_BLOCKS)

def seed_machinery():
    store = CatalogStore()
    for fields in DEMO_MACHINERY:
        try:
            store.create(fields)
        except DuplicateSlug as e:
            print(f"Skipping demo item: {e.message}")

with app.app_context():
    try:
        seed_admin_user()
        seed_categories()
        seed_machinery()
        seed_brands()
        seed_pages()
        print("Database seeded successfully!")
    except Exception as e:
        print(f"Seeding failed: {str(e)}")
        db.session.rollback()
        raise
