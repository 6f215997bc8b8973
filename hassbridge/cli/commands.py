"""CLI commands for hassbridge."""

import asyncio
import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console

from hassbridge import __logo__, __version__

app = typer.Typer(
    name="hassbridge",
    help=f"{__logo__} hassbridge - local smart-home intents to Home Assistant webhooks",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} hassbridge v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """hassbridge - local smart-home intents to Home Assistant webhooks."""
    pass


def _configure_logging(level: str, diagnose: bool, enabled: bool) -> None:
    logger.remove()
    if not enabled:
        logger.disable("hassbridge")
        return
    logger.add(sys.stderr, level=level.upper(), diagnose=diagnose)
    logger.enable("hassbridge")


# ============================================================================
# Config Commands
# ============================================================================


config_app = typer.Typer(help="Manage hassbridge config")
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
    from hassbridge.config.loader import get_config_path
    from hassbridge.config.validation import (
        find_unknown_paths,
        read_config_file,
        validate_config_data,
    )

    config_path = (config or get_config_path()).expanduser()
    if not config_path.exists():
        console.print(f"[red]Config file not found:[/red] {config_path}")
        raise typer.Exit(2)

    try:
        migrated = read_config_file(config_path)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON:[/red] {exc}")
        raise typer.Exit(2) from exc
    except Exception as exc:
        console.print(f"[red]Failed to read config:[/red] {exc}")
        raise typer.Exit(2) from exc

    try:
        cfg, gate, normalized = validate_config_data(migrated)
    except Exception as exc:
        console.print(f"[red]Schema validation failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    unknown_paths = find_unknown_paths(migrated, normalized)
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
        "forwarding="
        f"retry_delay={cfg.forwarding.retry_delay_seconds:g}s "
        f"timeout={cfg.forwarding.timeout_seconds:g}s"
    )
    console.print(f"proxy_selected_min={gate[0]}.{gate[1]} peers={len(cfg.peers)}")


# ============================================================================
# Replay
# ============================================================================


def _load_devices(path: Path) -> list[dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("devices", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must hold a list of devices")
    return [d for d in data if isinstance(d, dict)]


async def _no_wait(_seconds: float) -> None:
    return None


@app.command()
def replay(
    request: Path = typer.Option(..., "--request", "-r", help="Intent request JSON file"),
    devices: Path = typer.Option(..., "--devices", "-d", help="Registered devices JSON file"),
    response: list[str] = typer.Option(
        [],
        "--response",
        help="Scripted peer reply body, in send order (empty string = webhook not registered)",
    ),
    live: bool = typer.Option(False, "--live", help="Deliver to real peers from the config 'peers' map"),
    host: str = typer.Option("", "--host", help="Peer host for requests without a device id (live only)"),
    no_wait: bool = typer.Option(False, "--no-wait", help="Skip the retry backoff"),
    config: Path | None = typer.Option(None, "--config", help="Config path"),
    logs: bool = typer.Option(True, "--logs/--no-logs", help="Show bridge logs on stderr"),
):
    """Run one intent request through the bridge against a device snapshot."""
    from hassbridge.config.loader import load_config
    from hassbridge.dispatch import IntentDispatcher
    from hassbridge.host import HttpResponseData, HttpxDeviceManager, MockDeviceManager
    from hassbridge.protocol.errors import HandlerError

    cfg = load_config(config.expanduser() if config else None)
    _configure_logging(cfg.logging.level, cfg.logging.diagnose, logs)

    try:
        payload = json.loads(request.read_text(encoding="utf-8"))
        directory = _load_devices(devices)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Failed to read input:[/red] {exc}")
        raise typer.Exit(2) from exc

    if live:
        manager = HttpxDeviceManager(devices=directory, hosts=cfg.peers, default_host=host)
    else:
        manager = MockDeviceManager(
            directory,
            [HttpResponseData(status_code=200, body=body) for body in response],
        )

    async def _provide():
        return manager

    dispatcher = IntentDispatcher.from_config(
        cfg,
        _provide,
        sleep=_no_wait if no_wait else None,
    )
    try:
        result = asyncio.run(dispatcher.handle(payload))
    except HandlerError as exc:
        console.print(f"[red]{exc.error_code}:[/red] {exc.message}")
        console.print_json(json.dumps(exc.to_dict()))
        raise typer.Exit(1) from exc

    console.print_json(json.dumps(result))
    if not live:
        console.print(f"sends={len(manager.sent)}")


if __name__ == "__main__":
    app()
