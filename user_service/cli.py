"""
Command-line tools for the user service. For dev/test purposes only.

.. warning: DO NOT USE THESE ON A PRODUCTION DATABASE.

"""

from datetime import timedelta
import random

import click
from mimesis import Person
from mimesis.locales import Locale

from .domain import CreateUserRequest
from .exceptions import DuplicateEmail
from .factory import create_web_app
from .services import datastore
from .services.tokens import TokenCodec

SEED_PASSWORD = 'password'
SEED_USERS = [
    ('Brad Pitt', 'brad@gmail.com'),
    ('Tom Hanks', 'tom@gmail.com'),
    ('Emma Watson', 'emma@gmail.com'),
    ('Anne Hathway', 'anne@gmail.com'),
]


def _prob(P: int) -> bool:
    return random.randint(0, 100) < P


@click.group()
def cli() -> None:
    """Manage users in the user service database."""


@cli.command('create-db')
def create_db() -> None:
    """Create all of the tables."""
    app = create_web_app()
    with app.app_context():
        datastore.create_all()
    click.echo('Created tables')


@cli.command('create-user')
@click.option('--name', prompt='Your name')
@click.option('--email', prompt='Your email address')
@click.option('--password', prompt='Your password', hide_input=True)
@click.option('--admin', is_flag=True, default=False)
@click.option('--confirmed-email', is_flag=True, default=False)
def create_user(name: str, email: str, password: str, admin: bool,
                confirmed_email: bool) -> None:
    """Create a new user."""
    app = create_web_app()
    with app.app_context():
        datastore.create_all()
        service = app.extensions['user_service']
        try:
            user = service.create(CreateUserRequest(
                name=name,
                email=email,
                password=password,
                confirmed_email=confirmed_email,
                is_admin=admin
            ))
        except DuplicateEmail as e:
            raise click.ClickException(str(e)) from e
    click.echo(f'Created user {user.id} <{user.email}>')


@cli.command('seed')
def seed() -> None:
    """Add a few well-known users, all with the password ``password``."""
    app = create_web_app()
    with app.app_context():
        datastore.create_all()
        service = app.extensions['user_service']
        for name, email in SEED_USERS:
            try:
                user = service.create(CreateUserRequest(
                    name=name,
                    email=email,
                    password=SEED_PASSWORD,
                    confirmed_email=True
                ))
            except DuplicateEmail:
                click.echo(f'{email} already exists; skipping')
                continue
            click.echo(f'Created user {user.id} <{user.email}>')


@cli.command('populate')
@click.option('--count', default=100, show_default=True)
def populate(count: int) -> None:
    """Generate synthetic users."""
    app = create_web_app()
    with app.app_context():
        datastore.create_all()
        service = app.extensions['user_service']
        person = Person(Locale.EN)
        created = 0
        for _ in range(count):
            try:
                service.create(CreateUserRequest(
                    name=person.full_name(),
                    email=person.email(unique=True),
                    password=person.password(length=12),
                    confirmed_email=_prob(90),
                    is_admin=_prob(2)
                ))
            except DuplicateEmail:
                continue
            created += 1
    click.echo(f'Created {created} users')


@cli.command('generate-token')
@click.option('--user-id', type=int, prompt='User id')
@click.option('--admin', is_flag=True, default=False)
def generate_token(user_id: int, admin: bool) -> None:
    """Sign a token for a user without checking their password."""
    app = create_web_app()
    expires_in = app.config['JWT_EXPIRES_IN']
    tokens = TokenCodec(app.config['JWT_SECRET'],
                        timedelta(seconds=expires_in) if expires_in else None)
    click.echo(tokens.sign({'id': user_id, 'is_admin': admin}))


if __name__ == '__main__':
    cli()
