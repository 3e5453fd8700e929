"""
CLI for batchembed.

Provides command-line access to the batched embedding client.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from batchembed.core.config import BatchEmbedConfig, load_config
from batchembed.core.logging_setup import configure_logging
from batchembed.infrastructure.embedding import (
    BatchedEmbeddingClient,
    EmbeddingClientError,
    create_embedding_client_from_config,
)

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="batchembed",
    help="Batched text embeddings over a hosted embedding API",
    add_completion=False,
)

PREVIEW_VALUES = 4


def build_client(config: BatchEmbedConfig) -> BatchedEmbeddingClient:
    """Create the embedding client for a CLI invocation."""
    return create_embedding_client_from_config(config)


def _load(config_path: Optional[Path]) -> BatchEmbedConfig:
    load_dotenv()
    config = load_config(config_path)
    configure_logging(config.logging)
    return config


def _read_texts(texts: Optional[list[str]], file: Optional[Path]) -> list[str]:
    collected = list(texts or [])
    if file is not None:
        lines = file.read_text(encoding="utf-8").splitlines()
        collected.extend(line for line in lines if line.strip())
    return collected


async def _embed(client: BatchedEmbeddingClient, texts: list[str]) -> list[list[float]]:
    async with client:
        return await client.embed_many(texts)


@app.command()
def embed(
    texts: Optional[list[str]] = typer.Argument(None, help="Texts to embed"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="File with one text per line", exists=True, dir_okay=False
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Embedding model name"),
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size", "-b", help="Maximum texts per API call"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a YAML or JSON config file"
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table or json"),
):
    """Embed texts and print the resulting vectors."""
    if output not in ("table", "json"):
        console.print(f"[bold red]Error:[/bold red] Unknown output format: {output}")
        raise typer.Exit(1)

    try:
        cfg = _load(config_path)
        if model is not None:
            cfg.embedding.model = model
        if batch_size is not None:
            cfg.embedding.batch_size = batch_size

        inputs = _read_texts(texts, file)
        if not inputs:
            console.print("[bold red]Error:[/bold red] No texts given")
            raise typer.Exit(1)

        client = build_client(cfg)
        embeddings = asyncio.run(_embed(client, inputs))
    except (EmbeddingClientError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if output == "json":
        typer.echo(json.dumps(embeddings))
        return

    table = Table(title=f"Embeddings ({cfg.embedding.model})")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Text")
    table.add_column("Dim", justify="right")
    table.add_column("Preview")
    for index, (text, vector) in enumerate(zip(inputs, embeddings)):
        preview = ", ".join(f"{v:.4f}" for v in vector[:PREVIEW_VALUES])
        if len(vector) > PREVIEW_VALUES:
            preview += ", ..."
        table.add_row(str(index), escape(text[:40]), str(len(vector)), f"[{preview}]")
    console.print(table)


@app.command()
def config(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a YAML or JSON config file"
    ),
):
    """Show the resolved configuration."""
    try:
        load_dotenv()
        cfg = load_config(config_path)
    except (ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if cfg.embedding.api_key:
        cfg.embedding.api_key = "****"
    typer.echo(cfg.to_yaml())


if __name__ == "__main__":
    app()
