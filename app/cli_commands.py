"""
Flask CLI commands.

Commands:
- flask init-db: Create the tables
- flask create-user: Create a login (use ADMIN_EMAIL / WORKER_EMAIL for staff)
- flask seed-menu: Insert a few demo categories and items
"""

import click
from app.database import db_session, create_all
from app.exceptions import ValidationError

DEMO_MENU = {
    'Appetizers': [('Garlic Bread', '4.50', 0), ('Bruschetta', '6.00', 10)],
    'Mains': [('Margherita Pizza', '11.00', 0), ('Lasagna', '13.50', 15)],
    'Drinks': [('Lemonade', '3.00', 0)],
}


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create every table."""
        create_all()
        click.echo(click.style('Tables created.', fg='green'))

    @app.cli.command('create-user')
    @click.option('--email', prompt=True, help='Login email address')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
    @click.option('--name', default='', help='Full name')
    def create_user(email, password, name):
        """Create a login account."""
        from app.services.auth_service import register_user, resolve_role

        try:
            user = register_user(db_session, email, password, name)
        except ValidationError as e:
            click.echo(click.style(f'Error: {e.message}', fg='red'))
            return

        click.echo(click.style('User created.', fg='green', bold=True))
        click.echo(f'   Email: {user.email}')
        click.echo(f'   Role:  {resolve_role(user.email)}')

    @app.cli.command('seed-menu')
    def seed_menu():
        """Insert demo categories and menu items."""
        from app.services import menu_service

        for category_name, items in DEMO_MENU.items():
            category = menu_service.create_category(db_session, category_name)
            for name, price, discount in items:
                menu_service.create(db_session, {
                    'name': name,
                    'price': price,
                    'discount': discount,
                    'category': category.id,
                })
            click.echo(f'   {category_name}: {len(items)} items')
        click.echo(click.style('Demo menu created.', fg='green'))
