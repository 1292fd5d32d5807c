"""CLI tools for Flowaborate operations."""

import asyncio
import uuid

import click

from flowaborate.core.status_definitions import (
    STATUS_ORDER,
    get_allowed_transition_values,
    get_status_label,
)
from flowaborate.db.session import SessionLocal


@click.group()
def cli():
    """Flowaborate CLI tools."""
    pass


@cli.command()
@click.option("--dry-run", is_flag=True, help="List what is due without sending or logging")
def run_sweep(dry_run: bool):
    """
    Run the reminder / exception sweep once.

    Example:
        python -m flowaborate.cli run-sweep --dry-run
    """
    from flowaborate.services import exception_sweep_service

    db = SessionLocal()
    try:
        if dry_run:
            items = exception_sweep_service.plan_sweep(db)
            click.echo(f"{len(items)} item(s) due (before dedupe)")
            for item in items:
                click.echo(f"  {item.kind:<16} {item.collaboration.id}  {item.dedupe_key}")
            return

        summary = asyncio.run(exception_sweep_service.run_exception_sweep(db))
        click.echo(
            f"✓ Sweep complete: sent={summary.sent} skipped={summary.skipped} "
            f"failed={summary.failed}"
        )
        for kind, counts in summary.counts.items():
            click.echo(
                f"  {kind:<16} sent={counts.sent} skipped={counts.skipped} failed={counts.failed}"
            )
        for error in summary.errors:
            click.echo(f"  ❌ {error}")
    except exception_sweep_service.SweepAlreadyRunning:
        click.echo("❌ A sweep is already running")
    finally:
        db.close()


@cli.command()
def status_table():
    """Print the status lifecycle and allowed transitions."""
    for status in STATUS_ORDER:
        targets = get_allowed_transition_values(status) or ["(terminal)"]
        click.echo(f"{get_status_label(status):<18} {status.value:<18} → {', '.join(targets)}")


@cli.command()
@click.option("--host-id", required=True, help="Host profile id (identity provider subject)")
@click.option("--host-email", default=None, help="Host email (used when creating the profile)")
@click.option("--workspace-name", required=True, help="Workspace (show) name")
def create_collaboration(host_id: str, host_email: str | None, workspace_name: str):
    """
    Create a collaboration (and the host's workspace if needed) and print the invite link.

    Example:
        python -m flowaborate.cli create-collaboration --host-id <uuid> --workspace-name "My Show"
    """
    from sqlalchemy import select

    from flowaborate.db.models import Profile, Workspace
    from flowaborate.services import collaboration_service
    from flowaborate.services.invite_service import build_invite_url

    db = SessionLocal()
    try:
        host_uuid = uuid.UUID(host_id)
        host = db.get(Profile, host_uuid)
        if not host:
            host = Profile(id=host_uuid, email=host_email)
            db.add(host)
            db.flush()

        workspace = db.execute(
            select(Workspace).where(
                Workspace.owner_id == host_uuid, Workspace.name == workspace_name
            )
        ).scalar_one_or_none()
        if not workspace:
            workspace = Workspace(name=workspace_name, owner_id=host_uuid)
            db.add(workspace)
            db.flush()

        collaboration = collaboration_service.create_collaboration(db, workspace, host_uuid)
        click.echo(f"✓ Created collaboration: {collaboration.id}")
        click.echo(f"  Workspace: {workspace.name}")
        click.echo(f"→ Invite link: {build_invite_url(collaboration.invite_token)}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
