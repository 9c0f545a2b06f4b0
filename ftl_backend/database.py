# ftl_backend/database.py
import json

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from .models.base import db
from .models import AdminUser, AdminRoleEnum, Service, Page
from .utils import generate_slug, is_valid_email

INITIAL_SERVICES = [
    {'name': 'Microbiological Testing', 'category': 'Microbiology',
     'short_description': 'Pathogen and indicator organism testing for food and water samples.',
     'parameters': 'Total plate count, E. coli, Salmonella, Listeria, Yeast and mould',
     'turnaround_time': '3-5 working days', 'display_order': 1},
    {'name': 'Chemical Analysis', 'category': 'Chemistry',
     'short_description': 'Contaminant, additive and adulterant analysis.',
     'parameters': 'Heavy metals, pesticide residues, preservatives, colours',
     'turnaround_time': '5-7 working days', 'display_order': 2},
    {'name': 'Nutritional Labelling', 'category': 'Chemistry',
     'short_description': 'Proximate analysis for nutrition facts panels.',
     'parameters': 'Energy, protein, fat, carbohydrate, sugars, sodium',
     'turnaround_time': '5-7 working days', 'display_order': 3},
    {'name': 'Water Testing', 'category': 'Water',
     'short_description': 'Drinking and process water quality as per IS 10500.',
     'parameters': 'pH, TDS, hardness, coliforms',
     'turnaround_time': '3-5 working days', 'display_order': 4},
]

INITIAL_PAGES = [
    {'slug': 'home', 'title': 'Food Testing Laboratory',
     'content': {'heading': 'Reliable food testing you can trust',
                 'body': 'Accurate, timely analysis for food businesses, regulators and researchers.'}},
    {'slug': 'about', 'title': 'About Us',
     'content': {'body': 'We are an analytical laboratory dedicated to food safety and quality.'}},
]


def create_admin_user(email, password, full_name=None, role=AdminRoleEnum.ADMIN):
    """Adds an account to the session unless the email is taken. Returns the user or None."""
    if AdminUser.query.filter(func.lower(AdminUser.email) == email.lower()).first():
        return None
    user = AdminUser(email=email.lower(), full_name=full_name, role=role)
    user.set_password(password)
    db.session.add(user)
    return user


def populate_initial_data():
    """Creates the initial admin account and sample catalogue entries and pages on an empty database."""
    admin_email = current_app.config.get('INITIAL_ADMIN_EMAIL')
    admin_password = current_app.config.get('INITIAL_ADMIN_PASSWORD')

    if admin_email and admin_password:
        if create_admin_user(admin_email, admin_password, full_name="FTL Administrator"):
            current_app.logger.info(f"Admin user '{admin_email}' created.")
        else:
            current_app.logger.info(f"Admin user '{admin_email}' already exists.")
    else:
        current_app.logger.warning(
            "INITIAL_ADMIN_EMAIL or INITIAL_ADMIN_PASSWORD not set in config. "
            "Initial admin user will not be created automatically."
        )

    if Service.query.count() == 0:
        for service_data in INITIAL_SERVICES:
            db.session.add(Service(slug=generate_slug(service_data['name']), **service_data))
        current_app.logger.info(f"{len(INITIAL_SERVICES)} initial services populated.")
    else:
        current_app.logger.info("Services table already has data. Skipping initial population.")

    if Page.query.count() == 0:
        for page_data in INITIAL_PAGES:
            db.session.add(Page(slug=page_data['slug'], title=page_data['title'],
                                content=json.dumps(page_data['content'])))
        current_app.logger.info(f"{len(INITIAL_PAGES)} initial pages populated.")
    else:
        current_app.logger.info("Pages table already has data. Skipping initial population.")

    try:
        db.session.commit()
        current_app.logger.info("Initial data committed successfully.")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error committing initial data: {e}", exc_info=True)
        raise


@click.command('seed-db')
@click.option('--create-tables', is_flag=True, help='Create missing tables before seeding.')
@with_appcontext
def seed_db_command(create_tables):
    """Seeds the database with the initial admin account, services and pages."""
    if create_tables:
        db.create_all()
    populate_initial_data()
    click.echo('Database seeded with initial data.')


@click.command('create-admin')
@click.argument('email')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--full-name', default=None)
@click.option('--role', type=click.Choice([r.value for r in AdminRoleEnum]), default=AdminRoleEnum.ADMIN.value, show_default=True)
@with_appcontext
def create_admin_command(email, password, full_name, role):
    """Creates a back-office account."""
    if not is_valid_email(email):
        raise click.BadParameter('not a valid email address', param_hint='EMAIL')
    user = create_admin_user(email, password, full_name=full_name, role=AdminRoleEnum(role))
    if user is None:
        raise click.ClickException(f"An account with email '{email}' already exists.")
    db.session.commit()
    click.echo(f"Created {role} account {user.email}.")


def register_db_commands(app):
    """Registers database-related CLI commands."""
    app.cli.add_command(seed_db_command)
    app.cli.add_command(create_admin_command)
    app.logger.debug("Database CLI commands registered.")
