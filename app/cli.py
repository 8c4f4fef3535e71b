import click
from flask import Blueprint

from app.errors import ValidationError
from app.models import Role
from app.services.auth import set_role

bp = Blueprint('accounts', __name__, cli_group=None)


@bp.cli.command('set-role')
@click.argument('email')
@click.argument('role', type=click.Choice([r.name for r in Role], case_sensitive=False))
def set_role_command(email, role):
    """Change the role of the user registered with EMAIL."""
    try:
        user = set_role(email, role)
    except ValidationError as e:
        raise click.ClickException(e.message)
    click.echo(f'{user.email} is now {user.role.value}')
