"""Flask CLI commands for HomeLedger."""

from __future__ import annotations

import uuid

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("homeledger-init-db")
    def homeledger_init_db() -> None:
        """Create any missing tables."""

        from .extensions import get_engine, init_database

        init_database(get_engine())
        click.echo("Database tables are up to date.")

    @app.cli.command("homeledger-reconcile")
    @click.option("--repair", is_flag=True, default=False, help="Rewrite drifting balances")
    @click.option("--user-id", "user_id", default=None, help="Only check this user's assets")
    def homeledger_reconcile(repair: bool, user_id: str | None) -> None:
        """Compare asset balances with the ledger and report drift."""

        from .extensions import session_scope
        from .services.reconcile import reconcile

        owner = None
        if user_id:
            try:
                owner = uuid.UUID(user_id)
            except ValueError:
                raise click.BadParameter("must be a UUID", param_hint="--user-id") from None

        with session_scope() as session:
            drifted = reconcile(session, user_id=owner, repair=repair)
            lines = [
                f"{item.asset_id} {item.name}: balance={item.balance} "
                f"expected={item.expected} drift={item.drift}"
                for item in drifted
            ]

        if not lines:
            click.echo("All asset balances match the ledger.")
            return
        for line in lines:
            click.echo(line)
        click.echo(
            f"Repaired {len(lines)} asset(s)." if repair else f"{len(lines)} asset(s) drifted."
        )
