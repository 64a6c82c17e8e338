# Overview: Flask CLI command groups for bootstrap and inspection.

# backend/winehouse/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Apply migrations: python -m flask db upgrade
#
# System bootstrap:
# - python -m flask system init --admin-username admin --admin-password secret1
#   Idempotent: records the admin bootstrap flag, creating the admin account
#   first if no admin exists yet.
# - python -m flask system status
#   Show whether an admin has been bootstrapped.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection:
# - python -m flask users list [--role staff]
#
# Permission inspection:
# - python -m flask perms list [--role staff] [--category REPORTS]
# - python -m flask perms check jane REVIEW_PRODUCT_STATUS

import click
from flask.cli import with_appcontext

from .errors import DomainError
from .extensions import db
from .models import User
from .models.auth import VALID_ROLES
from .permissions import get_all_permission_codes, get_permission_definition, validate_permission_code
from .services import auth_service, permission_service, system_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--admin-username', help='Username for the first admin account')
@click.option('--admin-password', help='Password for the first admin account')
@with_appcontext
def init_system(admin_username, admin_password):
    """
    Ensure the system has its admin.

    - If an admin account already exists, records the bootstrap flag.
    - Otherwise creates the admin account from --admin-username and
      --admin-password (the first registered account is always admin).

    Safe to run repeatedly.
    """
    click.echo("START Initializing system...")

    if system_service.ensure_admin_flag():
        click.echo("PASS Admin already bootstrapped")
        click.echo(f"     {system_service.get_setting(system_service.ADMIN_BOOTSTRAP_KEY)}")
        return

    if not admin_username or not admin_password:
        click.echo("FAIL No admin exists. Pass --admin-username and --admin-password.")
        raise SystemExit(1)

    try:
        user = auth_service.register_user(admin_username, admin_password)
    except DomainError as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created {user.role} account: {user.username} (ID: {user.id})")


@system_group.command('status')
@with_appcontext
def system_status():
    """Show system bootstrap status."""
    status = system_service.status()
    click.echo(f"Admin bootstrapped: {'Yes' if status['admin_bootstrapped'] else 'No'}")
    if status["admin_bootstrap"]:
        click.echo(f"Bootstrap record:   {status['admin_bootstrap']}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """DEV/TEST ONLY: drop and recreate all tables."""
    if not yes:
        click.confirm("This deletes ALL data. Continue?", abort=True)
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@click.group('users')
def users_group():
    """User inspection commands."""


@users_group.command('list')
@click.option('--role', type=click.Choice(sorted(VALID_ROLES)), help='Filter by role')
@with_appcontext
def list_users(role):
    """List all users with their roles and shift status."""
    users = auth_service.list_users(role=role)

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 80)
    click.echo(f"{'ID':<5} {'Username':<20} {'Email':<30} {'Role':<8} {'On shift'}")
    click.echo("=" * 80)

    for user in users:
        on_shift = "Yes" if user.is_on_shift else "No"
        click.echo(f"{user.id:<5} {user.username:<20} {(user.email or '-'):<30} {user.role:<8} {on_shift}")

    click.echo("=" * 80 + "\n")


@click.group('perms')
def perms_group():
    """Permission inspection commands."""


@perms_group.command('list')
@click.option('--role', type=click.Choice(sorted(VALID_ROLES)), help='Filter by role')
@click.option('--category', help='Filter by category')
def list_permissions_cli(role, category):
    """List permissions, optionally filtered by role or category."""
    codes = get_all_permission_codes()
    if role:
        granted = permission_service.get_role_permissions(role)
        codes = [c for c in codes if c in granted]

    definitions = [get_permission_definition(c) for c in codes]
    if category:
        definitions = [d for d in definitions if d["category"] == category.upper()]

    click.echo(f"{'Code':<26} {'Name':<32} {'Category'}")
    click.echo("-" * 72)
    for perm in definitions:
        click.echo(f"{perm['code']:<26} {perm['name']:<32} {perm['category']}")
    click.echo(f"\n Total: {len(definitions)} permissions\n")


@perms_group.command('check')
@click.argument('username')
@click.argument('permission_code')
@with_appcontext
def check_permission_cli(username, permission_code):
    """Check whether a user has a permission."""
    if not validate_permission_code(permission_code):
        click.echo(f"FAIL Unknown permission: {permission_code}")
        raise SystemExit(1)

    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        click.echo(f"FAIL User '{username}' not found")
        raise SystemExit(1)

    if permission_service.user_has_permission(user, permission_code):
        click.echo(f"PASS {username} ({user.role}) HAS {permission_code}")
    else:
        click.echo(f"FAIL {username} ({user.role}) does NOT have {permission_code}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(perms_group)
