# dialtone/cli.py
"""
CLI entry point for dialtone.

Available commands:
  dialtone chat "PROMPT" [--config dialtone.yaml] [--stream] [--system TEXT]
  dialtone models [--config dialtone.yaml]

Requires: pip install "dialtone[cli]"
"""

from __future__ import annotations

import asyncio
from typing import Optional

try:
    import typer
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "CLI dependencies missing. Install with: pip install 'dialtone[cli]'"
    ) from exc

from .client import Dialtone
from .config import DEFAULT_ROUTER_MODEL_CONFIG, ClientOptions, RouterModelConfig
from .exceptions import DialtoneError
from .models import LLM, ChatCompletion, TokenUsage

app = typer.Typer(
    name="dialtone",
    help="Chat with the Dialtone LLM router from the command line.",
    add_completion=False,
)
console = Console()


def _load_options(config_path: Optional[str]) -> ClientOptions:
    if config_path:
        return ClientOptions.from_yaml(config_path)
    return ClientOptions.from_env()


def _usage_table(model: str, provider: str, usage: TokenUsage | None) -> Table:
    """Render routing outcome and token usage as a Rich table."""
    table = Table(title="Dialtone — Routing Result", show_lines=True)
    table.add_column("Model", style="bold cyan", no_wrap=True)
    table.add_column("Provider")
    table.add_column("Prompt")
    table.add_column("Completion")
    table.add_column("Total")

    if usage is None:
        table.add_row(model, provider, "-", "-", "-")
    else:
        table.add_row(
            model,
            provider,
            f"{usage.prompt_tokens:,}",
            f"{usage.completion_tokens:,}",
            f"{usage.total_tokens:,}",
        )
    return table


def _models_table(config: RouterModelConfig | None) -> Table:
    table = Table(title="Dialtone — Router Model Preferences", show_lines=True)
    table.add_column("Model", style="bold cyan", no_wrap=True)
    table.add_column("Providers")
    table.add_column("With tools")
    table.add_column("Without tools")

    for model in LLM:
        entry = config.for_model(model) if config is not None else None
        if entry is None:
            table.add_row(model.value, "[dim]server default[/dim]", "", "")
        elif hasattr(entry, "providers"):
            table.add_row(model.value, ", ".join(p.value for p in entry.providers), "", "")
        else:
            table.add_row(
                model.value,
                "",
                ", ".join(p.value for p in entry.tools_providers) or "[dim]none[/dim]",
                ", ".join(p.value for p in entry.no_tools_providers) or "[dim]none[/dim]",
            )
    return table


def _name(value: object) -> str:
    return getattr(value, "value", str(value))


async def _run_chat(options: ClientOptions, messages: list[dict], stream: bool) -> Table:
    async with Dialtone(options) as client:
        result = await client.chat.completions.create(messages, stream=stream or None)
        if isinstance(result, ChatCompletion):
            console.print(result.choices[0].message.content or "", markup=False, highlight=False)
            return _usage_table(_name(result.model), _name(result.provider), result.usage)

        model = provider = "-"
        usage = None
        async with result:
            async for chunk in result:
                model, provider = _name(chunk.model), _name(chunk.provider)
                usage = chunk.usage or usage
                for choice in chunk.choices:
                    if choice.delta.content:
                        console.print(choice.delta.content, end="", markup=False, highlight=False)
        console.print()
        return _usage_table(model, provider, usage)


@app.command()
def chat(
    prompt: str = typer.Argument(..., help="User message to send"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to dialtone.yaml"),
    stream: bool = typer.Option(False, "--stream", "-s", help="Print the reply as it streams"),
    system: Optional[str] = typer.Option(None, "--system", help="Optional system message"),
) -> None:
    """Send one message and print the reply, the routed model and token usage."""
    messages: list[dict] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    try:
        table = asyncio.run(_run_chat(_load_options(config), messages, stream))
    except DialtoneError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    console.print(table)


@app.command()
def models(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to dialtone.yaml"),
) -> None:
    """Show the router model preference table that requests will carry."""
    router_config = (
        ClientOptions.from_yaml(config).router_model_config if config else DEFAULT_ROUTER_MODEL_CONFIG
    )
    console.print(_models_table(router_config))
