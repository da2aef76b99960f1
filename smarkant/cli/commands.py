"""CLI commands for smarkant."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from smarkant import __logo__, __version__

app = typer.Typer(
    name="smarkant",
    help=f"{__logo__} smarkant - voice control for a height-adjustable desk",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} smarkant v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """smarkant - voice control for a height-adjustable desk."""
    pass


def _parse_slots(values: list[str] | None) -> dict[str, str]:
    slots: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"slot must be NAME=VALUE, got {item!r}", param_hint="--slot")
        slots[name.strip()] = value
    return slots


def _toggle_logs(enabled: bool) -> None:
    from loguru import logger

    if enabled:
        logger.enable("smarkant")
    else:
        logger.disable("smarkant")


# ============================================================================
# Config Commands
# ============================================================================


config_app = typer.Typer(help="Manage smarkant config")
app.add_typer(config_app, name="config")


@config_app.command("check")
def config_check(
    config: Path | None = typer.Option(None, "--config", help="Config path to validate"),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail when unknown keys are detected (possible typos)",
    ),
):
    """Validate config JSON structure and schema."""
    from smarkant.config.checks import find_unknown_paths, load_json_file, normalize_config_data
    from smarkant.config.loader import convert_keys, get_config_path
    from smarkant.config.schema import Config

    config_path = (config or get_config_path()).expanduser()
    if not config_path.exists():
        console.print(f"[red]Config file not found:[/red] {config_path}")
        raise typer.Exit(2)

    try:
        raw = load_json_file(config_path)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON:[/red] {exc}")
        raise typer.Exit(2) from exc
    except Exception as exc:
        console.print(f"[red]Failed to read config:[/red] {exc}")
        raise typer.Exit(2) from exc

    try:
        normalized = normalize_config_data(raw)
        cfg = Config.model_validate(convert_keys(normalized))
        if cfg.shadow.transport == "mqtt":
            cfg.shadow.resolve_host()
    except Exception as exc:
        console.print(f"[red]Schema validation failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    unknown_paths = find_unknown_paths(raw, normalized)
    if unknown_paths:
        console.print(
            f"[yellow]Unknown config keys detected ({len(unknown_paths)}):[/yellow]"
        )
        for item in unknown_paths[:10]:
            console.print(f"  - {item}")
        if len(unknown_paths) > 10:
            console.print(f"  - ... ({len(unknown_paths) - 10} more)")
        if strict:
            raise typer.Exit(1)

    console.print("[green]✓[/green] Config validation passed")
    console.print(f"path={config_path}")
    console.print(
        "shadow="
        f"transport={cfg.shadow.transport} "
        f"thing={cfg.shadow.thing_name} "
        f"endpoint={cfg.shadow.endpoint or '-'}:{cfg.shadow.port}"
    )
    console.print(f"server={cfg.server.host}:{cfg.server.port}{cfg.server.path}")


@config_app.command("show")
def config_show(
    config: Path | None = typer.Option(None, "--config", help="Config path to load"),
):
    """Print the effective configuration with credentials masked."""
    from smarkant.config.loader import convert_to_camel, load_config
    from smarkant.utils.redaction import redact_sensitive_map

    cfg = load_config(config.expanduser() if config else None)
    data = redact_sensitive_map(convert_to_camel(cfg.model_dump()))
    console.print_json(json.dumps(data))


# ============================================================================
# Onboard / Setup
# ============================================================================


@app.command()
def onboard():
    """Write a default smarkant configuration."""
    from smarkant.config.loader import get_config_path, save_config
    from smarkant.config.schema import Config

    config_path = get_config_path()
    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), config_path)
    console.print(f"[green]✓[/green] Created config at {config_path}")
    console.print("\nNext steps:")
    console.print("  1. Set [cyan]shadow.endpoint[/cyan], [cyan]shadow.region[/cyan] and the certificate paths")
    console.print("  2. Set [cyan]skill.applicationId[/cyan] to your skill id")
    console.print("  3. Start the webhook: [cyan]smarkant serve[/cyan]")


# ============================================================================
# Skill Commands
# ============================================================================


@app.command()
def messages():
    """Show the spoken reply templates for every locale."""
    from smarkant.skill.messages import DEFAULT_CATALOG

    table = Table(title="Reply templates")
    table.add_column("Locale", style="cyan")
    table.add_column("Message")
    table.add_column("Template", style="green")
    for locale, message_id, template in DEFAULT_CATALOG.items():
        table.add_row(locale.value, message_id.value, template)
    console.print(table)


@app.command()
def invoke(
    intent: str = typer.Argument(..., help="Intent name, e.g. MoveToPositionIntent"),
    slot: list[str] | None = typer.Option(None, "--slot", "-s", help="Slot value as NAME=VALUE"),
    locale: str = typer.Option("en-US", "--locale", "-l", help="Request locale"),
    dry_run: bool = typer.Option(
        True,
        "--dry-run/--live",
        help="Record shadow updates in memory instead of publishing them",
    ),
    config: Path | None = typer.Option(None, "--config", help="Config path to load"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show runtime logs"),
):
    """Run one intent through the skill and print the reply."""
    from smarkant.config.loader import load_config
    from smarkant.shadow import MockShadowTransport, serialize_update_document
    from smarkant.skill.errors import SkillRequestError
    from smarkant.skill.runtime import SkillRuntime

    _toggle_logs(logs)
    slots = _parse_slots(slot)
    cfg = load_config(config.expanduser() if config else None)
    transport = MockShadowTransport() if dry_run else None

    async def run():
        runtime = SkillRuntime(cfg, transport=transport)
        await runtime.start()
        try:
            return await runtime.handler.handle_intent(locale, intent, slots)
        finally:
            await runtime.stop()

    try:
        reply = asyncio.run(run())
    except SkillRequestError as exc:
        console.print(f"[red]Request rejected:[/red] {exc}")
        raise typer.Exit(1) from exc
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(1) from exc

    if reply.shadow is not None:
        status = "accepted" if reply.shadow.acknowledged else f"not acknowledged ({reply.shadow.error})"
        console.print(
            escape(f"shadow[{reply.shadow.thing_name}] {status}: {serialize_update_document(reply.shadow.document)}")
        )
    else:
        console.print("shadow: no update")
    console.print(f"[cyan]{__logo__} smarkant[/cyan] {reply.text}")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Webhook host override"),
    port: int | None = typer.Option(None, "--port", help="Webhook port override"),
    transport: str | None = typer.Option(None, "--transport", help="Shadow transport override: mqtt/mock"),
    config: Path | None = typer.Option(None, "--config", help="Config path to load"),
    logs: bool = typer.Option(True, "--logs/--no-logs", help="Show runtime logs"),
):
    """Start the shadow transport and the skill webhook."""
    from smarkant.api.skill_server import SkillWebhookServer
    from smarkant.config.loader import load_config
    from smarkant.skill.runtime import SkillRuntime

    _toggle_logs(logs)
    cfg = load_config(config.expanduser() if config else None)
    server_overrides = {k: v for k, v in {"host": host, "port": port}.items() if v}
    if server_overrides:
        cfg.server = cfg.server.model_copy(update=server_overrides)
    if transport:
        cfg.shadow = cfg.shadow.model_copy(update={"transport": transport})

    try:
        runtime = SkillRuntime(cfg)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(1) from exc

    async def run():
        await runtime.start()
        server = SkillWebhookServer(
            host=cfg.server.host,
            port=cfg.server.port,
            skill=runtime.handler,
            loop=asyncio.get_running_loop(),
            transport=runtime.transport,
            path=cfg.server.path,
            max_request_body_bytes=cfg.server.max_body_bytes,
            request_timeout_seconds=cfg.server.request_timeout_seconds,
            verify_timestamp=cfg.skill.verify_timestamp,
            timestamp_tolerance_seconds=cfg.skill.timestamp_tolerance_seconds,
        )
        server.start()
        console.print(
            f"[green]✓[/green] Skill webhook on http://{cfg.server.host}:{cfg.server.port}{server.path} "
            f"(transport={runtime.transport.name}, thing={cfg.shadow.thing_name})"
        )
        try:
            await asyncio.Event().wait()
        finally:
            server.stop()
            await runtime.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\nGoodbye!")
    except ValueError as exc:
        console.print(f"[red]Startup failed:[/red] {exc}")
        raise typer.Exit(1) from exc


if __name__ == "__main__":
    app()
