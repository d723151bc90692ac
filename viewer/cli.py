"""
This file is the entry point for the 'sunview' command-line tool.
Run 'sunview' in your shell to browse the model catalog and inspect one model as a tree.
"""
import asyncio
import re
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from common.app_setup import setup_logging, print_and_log, print_error
from common.config import Settings, get_settings
from common.errors import SunviewError
from connectors import connections_manager
from connectors.catalog_interface import CatalogConnector
from modelview.catalog import build_catalog
from modelview.index import DOCUMENT_SUFFIX, categorize, extract_descriptor, search_descriptors
from modelview.models import ModelDescriptor, coerce_model
from modelview.session import ModelViewSession
from modelview.summary import summarize
from viewer import render

T = TypeVar("T")

app = typer.Typer(add_completion=False, help="Browse SunSpec model definitions and inspect one model as a tree.")


@app.callback()
def main(ctx: typer.Context,
         source: Optional[str] = typer.Option(None, help="Catalog source: github or local"),
         models_dir: Optional[Path] = typer.Option(None, help="Directory of model documents (selects the local source)"),
         log_level: Optional[str] = typer.Option(None, help="Logging level"),
         log_file: Optional[Path] = typer.Option(None, help="Log file (default ~/.sunview/log.txt)")):
    """Configure the catalog source and logging for every command."""
    overrides = {}
    if models_dir is not None:
        overrides["local_dir"] = str(models_dir)
        overrides["source"] = "local"
    if source is not None:
        overrides["source"] = source
    if log_level is not None:
        overrides["log_level"] = log_level
    if log_file is not None:
        overrides["log_file"] = str(log_file)
    settings = get_settings().model_copy(update=overrides)
    setup_logging(app_name="sunview", loglevel=settings.log_level.upper(), logfile=settings.log_file)
    ctx.obj = settings


def _run(settings: Settings, job: Callable[[CatalogConnector], Awaitable[T]]) -> T:
    """Run ``job`` against the configured connector, turning errors into exit code 1."""
    async def runner() -> T:
        try:
            return await job(connections_manager.get_connector(settings.source, settings))
        finally:
            await connections_manager.close_all()
    try:
        return asyncio.run(runner())
    except (SunviewError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)


def _descriptor_for(ref: str) -> ModelDescriptor:
    """Catalog entry for a model number ("103") or document name ("model_103")."""
    if re.fullmatch(r"\d+", ref):
        return ModelDescriptor(id=int(ref), name=f"model_{ref}", source_name=f"model_{ref}{DOCUMENT_SUFFIX}")
    source_name = ref if ref.endswith(DOCUMENT_SUFFIX) else f"{ref}{DOCUMENT_SUFFIX}"
    match = re.search(r"model_(\d+)", source_name)
    return ModelDescriptor(id=int(match.group(1)) if match else 0,
                           name=source_name[: -len(DOCUMENT_SUFFIX)], source_name=source_name)


@app.command()
def catalog(ctx: typer.Context,
            category: Optional[str] = typer.Option(None, help="Only show this id range, e.g. 100-199")):
    """List the catalog grouped into model id ranges."""
    settings: Settings = ctx.obj
    descriptors = _run(settings, lambda c: build_catalog(c, settings.max_concurrency))
    categories = categorize(descriptors)
    if category is not None:
        if category not in categories:
            print_error(f"No models in category {category}")
            raise typer.Exit(1)
        categories = {category: categories[category]}
    console = Console()
    for table in render.category_tables(categories):
        console.print(table)
    print_and_log(f"{len(descriptors)} models")


@app.command()
def search(ctx: typer.Context, term: str = typer.Argument(..., help="Text to look for in id, name, label or description")):
    """Search the catalog."""
    settings: Settings = ctx.obj
    descriptors = _run(settings, lambda c: build_catalog(c, settings.max_concurrency))
    found = search_descriptors(descriptors, term)
    console = Console()
    if not found:
        console.print(f'No models match "{escape(term)}"')
        return
    console.print(render.descriptor_table(found, title=f"Search Results ({len(found)})"))


def _load_session(settings: Settings, ref: str) -> ModelViewSession:
    async def job(connector: CatalogConnector) -> ModelViewSession:
        session = ModelViewSession(connector)
        await session.select(_descriptor_for(ref))
        return session
    return _run(settings, job)


def _print_session(session: ModelViewSession, expand: List[str], expand_all: bool, term: str, with_summary: bool):
    if expand_all:
        session.expand_all()
    for node_id in expand:
        session.toggle(node_id)
    session.search(term)
    console = Console()
    if with_summary:
        console.print(render.summary_table(summarize(session.model)))
    tree = session.visible_tree
    if tree is None:
        console.print(f'No results found for "{escape(term)}"')
        return
    console.print(render.model_tree(tree))


@app.command()
def show(ctx: typer.Context,
         ref: str = typer.Argument(..., help="Model number or document name, e.g. 103 or model_103"),
         term: str = typer.Option("", "--search", "-s", help="Only show nodes matching this text"),
         expand: List[str] = typer.Option([], "--expand", "-e", help="Toggle a node by id (repeatable)"),
         expand_all: bool = typer.Option(False, "--all", "-a", help="Expand every node"),
         with_summary: bool = typer.Option(False, "--summary", help="Print the model summary first")):
    """Fetch one model and print it as a tree."""
    _print_session(_load_session(ctx.obj, ref), expand, expand_all, term, with_summary)


@app.command()
def summary(ctx: typer.Context,
            ref: str = typer.Argument(..., help="Model number or document name")):
    """Print point and group counts of one model."""
    session = _load_session(ctx.obj, ref)
    Console().print(render.summary_table(summarize(session.model)))


@app.command("open")
def open_file(ctx: typer.Context,
              path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Model document (JSON or YAML)"),
              term: str = typer.Option("", "--search", "-s", help="Only show nodes matching this text"),
              expand: List[str] = typer.Option([], "--expand", "-e", help="Toggle a node by id (repeatable)"),
              expand_all: bool = typer.Option(False, "--all", "-a", help="Expand every node"),
              with_summary: bool = typer.Option(False, "--summary", help="Print the model summary first")):
    """Print a model document from a local file as a tree."""
    try:
        model = coerce_model(path)
        descriptor = extract_descriptor(path.name, model.model_dump(by_alias=True))
    except SunviewError as e:
        print_error(f"{path}: {e}")
        raise typer.Exit(1)
    session = ModelViewSession()
    session.show(model, descriptor)
    _print_session(session, expand, expand_all, term, with_summary)


if __name__ == "__main__":
    app()
