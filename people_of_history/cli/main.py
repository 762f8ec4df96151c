"""People of History CLI - Main entry point.

This module provides the command-line interface for browsing family trees.
"""

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from people_of_history.agents import NodeStatus, TreeExpander, TreeNode
from people_of_history.agents.expand_tree import relations_for
from people_of_history.config import settings
from people_of_history.errors import NotFound, TransportError
from people_of_history.render import age_badge, lifespan
from people_of_history.schemas import Person
from people_of_history.session import KnowledgeBaseSession

app = typer.Typer(
    name="history-tree",
    help="People of History - Browse the family trees of historical people",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Search Wikidata for historical people and explore their families."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def person_line(person: Person) -> str:
    """One-line rich markup summary of a person."""
    parts = [f"[bold]{escape(person.label)}[/bold]"]
    span = lifespan(person.birth_year, person.death_year)
    if span:
        parts.append(f"[dim]{span}[/dim]")
    badge = age_badge(person)
    if badge:
        parts.append(f"[cyan]({badge})[/cyan]")
    return " ".join(parts)


def build_tree(node: TreeNode, expander: TreeExpander, branch: Tree | None = None) -> Tree:
    """Render a tree node and its spawned relatives as a rich Tree."""
    if node.status is NodeStatus.READY and node.person:
        text = person_line(node.person)
    elif node.status is NodeStatus.FAILED:
        text = f"[red]{node.entity_id}: Couldn't load.[/red]"
    else:
        text = f"[dim]{node.entity_id}: Loading…[/dim]"

    tree = branch.add(text) if branch is not None else Tree(text)
    if node.status is not NodeStatus.READY:
        return tree

    for relation in relations_for("both"):
        count = len(node.relation_ids(relation))
        group = tree.add(f"[bold cyan]{relation.title()}[/bold cyan] ({count})")
        relatives = node.relatives(relation)
        if not count:
            group.add(f"[dim]No {relation} found.[/dim]")
        elif relatives is not None:
            for relative in relatives:
                build_tree(relative, expander, group)
        elif node.depth >= expander.max_depth:
            group.add("[dim]Depth limit reached.[/dim]")
        else:
            group.add("[dim]Not expanded.[/dim]")
    return tree


@app.command()
def search(
    query: str = typer.Argument(..., help="Name to search for"),
    limit: int = typer.Option(
        settings.search_limit, "--limit", "-k", help="Number of raw hits to check"
    ),
) -> None:
    """Search for people by name (non-human items are filtered out)."""
    console.print(f"\n[bold cyan]Searching for:[/bold cyan] {query}\n")

    async def run():
        async with KnowledgeBaseSession(search_limit=limit) as kb:
            return await kb.search.search(query)

    try:
        hits = asyncio.run(run())
    except TransportError as e:
        console.print(f"[red]Search failed: {e}[/red]\n")
        raise typer.Exit(1) from e

    if not hits:
        console.print("[yellow]No results.[/yellow]\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Description")
    for hit in hits:
        table.add_row(hit.id, escape(hit.label), escape(hit.description))

    console.print(table)
    console.print()


@app.command()
def person(
    qid: str = typer.Argument(..., help="Wikidata identifier, e.g. Q3044"),
) -> None:
    """Show one person's biographical summary."""

    async def run():
        async with KnowledgeBaseSession() as kb:
            return await kb.resolver.resolve(qid)

    try:
        found = asyncio.run(run())
    except (NotFound, TransportError) as e:
        console.print(f"[red]Error: {e}[/red]\n")
        raise typer.Exit(1) from e

    console.print(f"\n{person_line(found)}")
    if found.description:
        console.print(f"[dim]{escape(found.description)}[/dim]")

    table = Table(show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("ID", found.id)
    table.add_row("Parents", str(found.parent_count))
    table.add_row("Children", str(found.child_count))
    table.add_row("Wikipedia", found.wikipedia_url or "No Wiki")
    if found.image_url:
        table.add_row("Image", found.image_url)
    console.print(table)
    console.print()


@app.command()
def tree(
    qid: str = typer.Argument(..., help="Wikidata identifier of the root person"),
    depth: int = typer.Option(
        1, "--depth", "-d", min=0, help=f"Levels to expand (capped at {settings.max_depth})"
    ),
    relation: str = typer.Option(
        "both", "--relation", "-r", help="Relations to follow: parents, children or both"
    ),
) -> None:
    """Expand a person's family tree and print it."""
    try:
        relations_for(relation)  # type: ignore[arg-type]
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from e

    async def run():
        async with KnowledgeBaseSession() as kb:
            expander = kb.tree()
            root = await expander.set_root(qid)
            if root.status is NodeStatus.READY:
                await expander.expand_to(root, depth, relation)  # type: ignore[arg-type]
            return expander, root

    expander, root = asyncio.run(run())
    if root.status is NodeStatus.FAILED:
        console.print(f"[red]Error: {root.error}[/red]\n")
        raise typer.Exit(1)

    console.print()
    console.print(build_tree(root, expander))
    console.print()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(5001, "--port", help="Port to listen on"),
    config_name: str = typer.Option(
        "development", "--config", help="Configuration: development or production"
    ),
) -> None:
    """Run the JSON web API."""
    from people_of_history.web.app import create_app

    web_app = create_app(config_name)
    console.print(f"\n[bold cyan]Serving People of History on http://{host}:{port}[/bold cyan]\n")
    web_app.run(host=host, port=port, debug=web_app.config["DEBUG"])


if __name__ == "__main__":
    app()
