"""Testing helpers."""

from contextlib import contextmanager
from typing import Generator

from flask import Flask
from mimesis import Person
from sqlalchemy.orm.session import Session

from ..users import util
from ..users.models import db


@contextmanager
def temporary_db(database_url: str = 'sqlite:///:memory:',
                 create: bool = True, drop: bool = True) \
        -> Generator[Session, None, None]:
    """Provide an in-memory sqlite database for testing purposes."""
    app = Flask('foo')
    app.config['SQLALCHEMY_DATABASE_URI'] = database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['ACCESS_TOKEN_SECRET'] = 'fooaccess'
    app.config['REFRESH_TOKEN_SECRET'] = 'foorefresh'
    app.config['ACCESS_TOKEN_EXPIRY'] = 3600
    app.config['REFRESH_TOKEN_EXPIRY'] = 36000
    with app.app_context():
        util.init_app(app)
        if create:
            util.create_all()
        try:
            yield db.session
        finally:
            if drop:
                util.drop_all()


def fake_person(n: int = 0) -> dict:
    """Generate registration data for a synthetic user."""
    person = Person()
    return {
        'full_name': person.full_name(),
        'email': f'{n}{person.email()}',
        'username': f'{person.username()}{n}',
        'password': person.password(length=12)
    }
