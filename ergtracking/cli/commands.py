"""CLI commands for the ERG tracking backend."""

from typing import Optional

import typer
from rich.console import Console

from ergtracking import __version__
from ergtracking.core.config import get_settings

app = typer.Typer(name="ergtracking", help="ERG tracking backend CLI")
console = Console()


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"[bold green]ERG Tracking v{__version__}[/bold green]")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind (default: HOST)"),
    port: Optional[int] = typer.Option(None, help="Port to bind (default: PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Start API server.

    Args:
        host: Host to bind
        port: Port to bind
        reload: Enable auto-reload
    """
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[yellow]Starting server on {host}:{port}[/yellow]")
    uvicorn.run(
        "ergtracking.api.app:app",
        host=host,
        port=port,
        reload=reload,
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
    )


if __name__ == "__main__":
    app()
