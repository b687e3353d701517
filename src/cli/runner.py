# src/cli/runner.py

"""Headless CLI front end for the catalog controller."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.errors import NoDataAvailable
from src.models.product import Product
from src.services.catalog_controller import (
    CatalogController,
    Provenance,
)
from src.services.connectivity import (
    ConnectivityMonitor,
    ConnectivitySource,
    StaticConnectivity,
)
from src.sources.remote_source import RemoteSource
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("catalog_browser.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def build_controller(
    offline: bool = False,
    db_path: str | None = None,
) -> tuple[CatalogController, CatalogStore]:
    """Wire the controller to the real remote source and cache."""
    store = CatalogStore(Path(db_path) if db_path else None)
    connectivity: ConnectivitySource = (
        StaticConnectivity(connected=False)
        if offline
        else ConnectivityMonitor()
    )
    controller = CatalogController(
        remote=RemoteSource(),
        store=store,
        connectivity=connectivity,
    )
    return controller, store


def _print_table(products: list[Product], title: str) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", width=5, justify="right")
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Category", style="magenta")

    for p in products:
        table.add_row(
            str(p.id),
            p.title[:60],
            f"${p.price:,.2f}",
            f"⭐ {p.rating.rate} / 5 ({p.rating.count} reviews)",
            p.category,
        )

    Console().print(table)


def _print_details(product: Product) -> None:
    """Render a single product as a Rich panel on stdout."""
    body = (
        f"[bold]{product.title}[/bold]\n\n"
        f"[green]${product.price:,.2f}[/green]   "
        f"⭐ {product.rating.rate} / 5 ({product.rating.count} reviews)\n"
        f"[magenta]{product.category}[/magenta]\n\n"
        f"{product.description}\n\n"
        f"[dim]{product.image}[/dim]"
    )
    Console().print(
        Panel(body, title=f"Product #{product.id}", title_align="left")
    )


def _report_provenance(
    provenance: Provenance,
    advisory: str | None,
    errors: list[str],
) -> None:
    """Tell the user whether they are looking at cached data."""
    for error_msg in errors:
        _err.print(f"[red]Error: {error_msg}[/red]")
    if advisory:
        _err.print(f"[yellow]{advisory}[/yellow]")
    _err.print(f"[dim]source: {provenance.value}[/dim]")


async def cli_catalog(
    output_format: str,
    offline: bool = False,
    db_path: str | None = None,
) -> int:
    """Load and print the catalog; return an exit code (0=ok, 1=fail)."""
    controller, store = build_controller(offline, db_path)
    try:
        result = await controller.load_catalog()
    except NoDataAvailable as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    finally:
        controller.close()
        store.close()

    _report_provenance(result.provenance, result.advisory, result.errors)
    if result.write_failures:
        _err.print(
            f"[yellow]{result.write_failures} products could not be "
            "saved for offline use[/yellow]"
        )
    _err.print(f"[green]✓ {len(result.products)} products[/green]")

    if output_format == "json":
        json.dump(
            [p.to_dict() for p in result.products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    else:
        _print_table(result.products, "Products")
    return 0


async def cli_item(
    product_id: int,
    output_format: str,
    offline: bool = False,
    db_path: str | None = None,
) -> int:
    """Load and print one product; return an exit code (0=ok, 1=fail)."""
    controller, store = build_controller(offline, db_path)
    try:
        result = await controller.load_item(product_id)
    except NoDataAvailable as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    finally:
        controller.close()
        store.close()

    _report_provenance(result.provenance, result.advisory, result.errors)

    if output_format == "json":
        json.dump(
            result.product.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    else:
        _print_details(result.product)
    return 0


def run_health_check(db_path: str | None = None) -> int:
    """Probe connectivity and report cache size."""
    _err.print("[bold]Running connectivity health check...[/bold]")
    status = ConnectivityMonitor().check()

    store = CatalogStore(Path(db_path) if db_path else None)
    try:
        cached = store.count()
    finally:
        store.close()

    table = Table(
        title="Catalog Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Check", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Notes", style="dim")

    if status.connected:
        net_status = "[green]✅ ONLINE[/green]"
    else:
        net_status = "[red]❌ OFFLINE[/red]"
    latency = (
        f"{status.latency_ms:.0f}ms" if status.latency_ms > 0 else "—"
    )
    table.add_row(
        "Network", net_status, f"{latency} {status.message}".strip(),
    )
    table.add_row(
        "Cache",
        f"{cached} products",
        str(store.path),
    )

    Console().print(table)
    return 0 if status.connected else 1
