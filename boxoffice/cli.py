# boxoffice/cli.py
import os

import click
from flask import Flask

from boxoffice.errors import ValidationError
from boxoffice.extensions import db
from boxoffice.models import Seller, User
from boxoffice.services import inventory


def register_commands(app: Flask) -> None:

    @app.cli.command("create-admin")
    @click.option("--username", default=lambda: os.environ.get("ADMIN_USERNAME", "admin"),
                  show_default=True, help="Admin username")
    @click.option("--password", default=lambda: os.environ.get("ADMIN_PASSWORD"),
                  help="Password (prompted when missing)")
    @click.option("--force", is_flag=True, default=False,
                  help="Reset the password if the user already exists")
    def create_admin(username: str, password: str | None, force: bool):
        """Create or reset an admin account (bcrypt hash)."""
        db.create_all()

        if not password:
            password = click.prompt("Password", hide_input=True, confirmation_prompt=True)

        u = User.query.filter_by(username=username).first()
        if u and not force:
            click.echo(f"❗ User '{username}' already exists. Use --force to reset the password.")
            return

        if not u:
            u = User(username=username)
            db.session.add(u)
        u.is_admin = True
        u.set_password(password)
        db.session.commit()
        click.echo(f"✅ Admin ready: {username}")

    @app.cli.command("init-settings")
    def init_settings():
        """Create missing tickets_sold / tickets_total / pix_key rows."""
        db.create_all()
        created = inventory.ensure_defaults()
        click.echo(f"Created: {', '.join(created)}" if created else "Settings already present.")

    @app.cli.command("set-setting")
    @click.argument("key")
    @click.argument("value")
    def set_setting(key: str, value: str):
        """Set tickets_total or pix_key."""
        try:
            inventory.set_setting(key, value)
        except ValidationError as e:
            raise click.ClickException(e.message)
        click.echo(f"{key} = {value}")

    @app.cli.command("add-seller")
    @click.argument("name")
    @click.option("--inactive", is_flag=True, default=False)
    def add_seller(name: str, inactive: bool):
        s = Seller(name=name.strip(), active=not inactive)
        db.session.add(s)
        db.session.commit()
        click.echo(f"Seller #{s.id} {s.name}")

    @app.cli.command("toggle-seller")
    @click.argument("seller_id", type=int)
    def toggle_seller(seller_id: int):
        """Hide/show a seller in the checkout form; history is kept."""
        s = db.session.get(Seller, seller_id)
        if s is None:
            raise click.ClickException(f"Seller #{seller_id} not found")
        s.active = not s.active
        db.session.commit()
        click.echo(f"Seller #{s.id} {s.name} active={s.active}")
