"""Flask CLI commands for SpendWise."""

from __future__ import annotations

from datetime import date

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("spendwise-seed")
    def spendwise_seed() -> None:
        """Insert the default categories and currencies (idempotent)."""

        # Import here to avoid circular imports at module import time
        from .extensions import session_scope
        from .services.categories import seed_default_categories
        from .services.currencies import seed_default_currencies

        with session_scope() as session:
            categories = seed_default_categories(session)
            currencies = seed_default_currencies(session)
        click.echo(f"Seeded {categories} categories and {currencies} currencies.")

    @app.cli.command("spendwise-create-user")
    @click.option("--name", required=True, help="Display name")
    @click.option("--email", required=True, help="Login email")
    @click.password_option(help="Login password")
    def spendwise_create_user(name: str, email: str, password: str) -> None:
        """Create a user account."""

        from .errors import ValidationError
        from .extensions import session_scope
        from .services.auth import MIN_PASSWORD_LENGTH, register_user

        if len(password) < MIN_PASSWORD_LENGTH:
            raise click.BadParameter(
                f"must be at least {MIN_PASSWORD_LENGTH} characters", param_hint="password"
            )
        try:
            with session_scope() as session:
                user = register_user(session, name=name, email=email, password=password)
                user_id = user.id
        except ValidationError as exc:
            raise click.ClickException("; ".join(sum(exc.errors.values(), []))) from exc
        click.echo(f"Created user #{user_id} <{email}>.")

    @app.cli.command("spendwise-mark-overdue")
    @click.option(
        "--today",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        default=None,
        help="Reference date (defaults to today)",
    )
    def spendwise_mark_overdue(today) -> None:
        """Flag past-due open debts as overdue."""

        from .extensions import session_scope
        from .services.debts import mark_overdue

        reference = today.date() if today is not None else date.today()
        with session_scope() as session:
            changed = mark_overdue(session, reference)
        click.echo(f"Marked {changed} debt(s) overdue.")

    @app.cli.command("spendwise-verify-ledger")
    @click.argument("user_id", type=int)
    def spendwise_verify_ledger(user_id: int) -> None:
        """Replay a user's ledger and compare it with the stored balance."""

        from .extensions import session_scope
        from .money import format_money
        from .services.ledger import verify_ledger

        with session_scope() as session:
            check = verify_ledger(session, user_id)
        click.echo(
            f"entries={check.entries} replayed={format_money(check.replayed)} "
            f"stored={format_money(check.stored)}"
        )
        if not check.consistent:
            raise click.ClickException(f"Ledger mismatch at entry {check.first_bad_entry_id}")
        click.echo("Ledger consistent.")
