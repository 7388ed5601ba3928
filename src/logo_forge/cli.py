"""Typer CLI for Logo Forge."""

import asyncio

import typer
from rich.console import Console

app = typer.Typer(name="logo-forge", help="Logo Forge: AI logo generation backend")
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(3001, help="Bind port"),
):
    """Start the Logo Forge API server."""
    import uvicorn
    from logo_forge.app import create_app

    console.print(f"[bold green]Starting Logo Forge on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def grant(
    external_id: str = typer.Argument(..., help="Auth provider user id"),
    revoke: bool = typer.Option(False, "--revoke", help="Remove unlimited access instead"),
):
    """Grant (or revoke) unlimited generations for a user."""
    from logo_forge.common.config import get_settings
    from logo_forge.common.database import DatabaseManager
    from logo_forge.accounts.service import AccountService

    async def _run():
        settings = get_settings()
        db = DatabaseManager(settings)
        await db.init()
        await db.create_all()
        try:
            async with db.get_session() as session:
                user = await AccountService(settings).set_unlimited(
                    session, external_id, enabled=not revoke,
                )
                return user.id
        finally:
            await db.close()

    user_id = asyncio.run(_run())
    state = "revoked" if revoke else "granted"
    console.print(f"[bold green]Unlimited access {state}[/bold green]: user {user_id}")


@app.command()
def usage(
    identity: str = typer.Argument(..., help="Ledger identity, e.g. user:<id> or ip:<address>"),
):
    """Show the stored generation counter for an identity."""
    from logo_forge.common.config import get_settings
    from logo_forge.common.database import DatabaseManager
    from logo_forge.usage.ledger import DatabaseUsageLedger

    async def _run():
        db = DatabaseManager(get_settings())
        await db.init()
        await db.create_all()
        try:
            return await DatabaseUsageLedger(db).get_record(identity)
        finally:
            await db.close()

    record = asyncio.run(_run())
    if record is None:
        console.print(f"[yellow]No usage recorded[/yellow] for {identity}")
        raise typer.Exit(1)
    console.print(
        f"[bold]{record.identity}[/bold] {record.count} round(s) "
        f"in {record.period_key} ({record.tier.value})"
    )


@app.command("sign-user")
def sign_user(
    external_id: str = typer.Argument(..., help="Auth provider user id"),
):
    """Print the X-User-Signature value for a user id."""
    from logo_forge.common.config import get_settings
    from logo_forge.common.security import sign_user_id

    console.print(sign_user_id(external_id, get_settings().secret_key))


@app.command()
def health(
    url: str = typer.Option("http://localhost:3001", help="Server URL"),
):
    """Check Logo Forge server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] v{data['version']}")
    except (httpx.HTTPError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
