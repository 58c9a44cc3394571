#!/usr/bin/env python3
"""
fsbridge - Desktop filesystem bridge

Main entry point for the fsbridge CLI application.
"""

import json
import os

import click
from rich.console import Console
from rich.table import Table

from core import FileAccessConfig, FileOperationError, AuditLogger
from modules.file_access import FileAccess, COMMAND_NAMES, dispatch


console = Console()


def get_config(ctx: click.Context) -> FileAccessConfig:
    """Get the configuration loaded for this invocation."""
    return ctx.obj["config"]


def get_file_access(ctx: click.Context) -> FileAccess:
    """Get a configured FileAccess instance."""
    return get_config(ctx).build_file_access()


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {message}", highlight=False)
    raise SystemExit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="fsbridge")
@click.option("--config", "config_path", default="config.yaml", show_default=True,
              help="Path to the YAML configuration file.")
@click.pass_context
def fsbridge(ctx, config_path: str):
    """
    fsbridge - Desktop filesystem bridge

    Typed file operations with home-directory shorthand and
    normalized errors.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = FileAccessConfig.load(config_path)
    ctx.obj["config_path"] = config_path


@fsbridge.command()
@click.pass_context
def home(ctx):
    """Show the home directory used for '~/' paths."""
    try:
        console.print(get_file_access(ctx).home_dir(), highlight=False)
    except FileOperationError as e:
        fail(str(e))


@fsbridge.command()
@click.argument("path")
@click.pass_context
def exists(ctx, path: str):
    """Check whether PATH exists and what kind of entry it is."""
    access = get_file_access(ctx)

    if access.is_dir(path):
        console.print(f"✅ [green]directory[/green] {access.resolve(path)}", highlight=False)
    elif access.exists(path):
        console.print(f"✅ [green]file[/green] {access.resolve(path)}", highlight=False)
    else:
        console.print(f"❌ [red]not found[/red] {access.resolve(path)}", highlight=False)
        raise SystemExit(1)


@fsbridge.command()
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Parse the file as JSON.")
@click.option("--bytes", "as_bytes", is_flag=True, help="Print the size and hex dump of raw bytes.")
@click.pass_context
def read(ctx, path: str, as_json: bool, as_bytes: bool):
    """Print the contents of PATH."""
    access = get_file_access(ctx)

    try:
        if as_json:
            value = access.read_structured(path)
            console.print_json(json.dumps(value, ensure_ascii=False))
        elif as_bytes:
            data = access.read_bytes(path)
            console.print(f"[dim]{len(data)} bytes[/dim]")
            click.echo(data.hex())
        else:
            click.echo(access.read_text(path), nl=False)
    except FileOperationError as e:
        fail(str(e))


@fsbridge.command()
@click.argument("path")
@click.argument("content")
@click.option("--append", is_flag=True, help="Append instead of overwriting.")
@click.option("--json", "as_json", is_flag=True, help="CONTENT is a JSON document to pretty-print.")
@click.pass_context
def write(ctx, path: str, content: str, append: bool, as_json: bool):
    """Write CONTENT to PATH. Parent directories must already exist."""
    access = get_file_access(ctx)

    try:
        if as_json:
            try:
                value = json.loads(content)
            except ValueError as e:
                fail(f"CONTENT is not valid JSON: {e}")
            access.write_structured(path, value)
        elif append:
            access.append_text(path, content)
        else:
            access.write_text(path, content)
    except FileOperationError as e:
        fail(str(e))

    console.print(f"[green]Wrote:[/green] {access.resolve(path)}", highlight=False)


@fsbridge.command("ls")
@click.argument("path", default=".")
@click.pass_context
def list_dir(ctx, path: str):
    """List the entries of directory PATH."""
    access = get_file_access(ctx)

    try:
        names = access.list_dir(path)
    except FileOperationError as e:
        fail(str(e))

    if not names:
        console.print("[dim]Directory is empty.[/dim]")
        return

    resolved = access.resolve(path)
    for name in names:
        child = os.path.join(resolved, name)
        indicator = "📁" if access.is_dir(child) else "📄"
        console.print(f"  {indicator} {name}", highlight=False)


@fsbridge.command()
@click.argument("path")
@click.pass_context
def mkdir(ctx, path: str):
    """Create directory PATH and any missing parents."""
    access = get_file_access(ctx)

    try:
        access.create_dir(path)
    except FileOperationError as e:
        fail(str(e))

    console.print(f"[green]Created:[/green] {access.resolve(path)}", highlight=False)


@fsbridge.command()
@click.argument("path")
@click.pass_context
def rm(ctx, path: str):
    """Delete file PATH. A missing file is not an error."""
    access = get_file_access(ctx)

    try:
        access.delete_file(path)
    except FileOperationError as e:
        fail(str(e))

    console.print(f"[green]Deleted:[/green] {access.resolve(path)}", highlight=False)


@fsbridge.command()
@click.argument("src")
@click.argument("dst")
@click.pass_context
def cp(ctx, src: str, dst: str):
    """Copy file SRC to DST, overwriting DST."""
    access = get_file_access(ctx)

    try:
        copied = access.copy_file(src, dst)
    except FileOperationError as e:
        fail(str(e))

    console.print(f"[green]Copied:[/green] {copied} bytes", highlight=False)


@fsbridge.command()
@click.argument("src")
@click.argument("dst")
@click.pass_context
def mv(ctx, src: str, dst: str):
    """Move file SRC to DST."""
    access = get_file_access(ctx)

    try:
        access.move_file(src, dst)
    except FileOperationError as e:
        fail(str(e))

    console.print(f"[green]Moved:[/green] {access.resolve(src)} → {access.resolve(dst)}", highlight=False)


@fsbridge.command()
@click.argument("path")
@click.pass_context
def stat(ctx, path: str):
    """Show size and modification time of PATH."""
    access = get_file_access(ctx)

    try:
        info = access.file_info(path)
    except FileOperationError as e:
        fail(str(e))

    table = Table(title=info.path)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Kind", "directory" if info.is_dir else "file" if info.is_file else "other")
    table.add_row("Size", f"{info.size} bytes")
    table.add_row("Modified", info.modified.isoformat())

    console.print(table)


@fsbridge.command()
@click.argument("name", type=click.Choice(COMMAND_NAMES))
@click.argument("args_json", default="{}")
@click.pass_context
def invoke(ctx, name: str, args_json: str):
    """Invoke command NAME with ARGS_JSON as the UI layer would."""
    try:
        args = json.loads(args_json)
    except ValueError as e:
        fail(f"ARGS_JSON is not valid JSON: {e}")

    if not isinstance(args, dict):
        fail("ARGS_JSON must be a JSON object")

    result = dispatch(get_file_access(ctx), name, args)
    click.echo(json.dumps(result.to_dict(), ensure_ascii=False))

    if not result.success:
        raise SystemExit(1)


@fsbridge.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.option("--export", "export_format", type=click.Choice(["json", "csv"]),
              help="Print the whole log in this format instead.")
@click.pass_context
def audit(ctx, limit: int, export_format: str):
    """View the audit log."""
    config = get_config(ctx)

    if not os.path.exists(config.audit_log_path):
        console.print("[dim]No audit entries found.[/dim]")
        return

    logger = AuditLogger(log_path=config.audit_log_path)

    if export_format:
        click.echo(logger.export(format=export_format), nl=False)
        return

    entries = logger.get_recent(limit=limit)

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Operation")
    table.add_column("Target")
    table.add_column("Status")
    table.add_column("Result")

    for entry in entries:
        # Format timestamp
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        # Status color
        status_str = entry.status
        if entry.status == "executed":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"

        table.add_row(
            time_str,
            entry.operation,
            entry.target[:50] + "..." if len(entry.target) > 50 else entry.target,
            status_str,
            entry.result or "—"
        )

    console.print(table)


@fsbridge.group()
def config():
    """Manage the configuration file."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Show the effective configuration."""
    cfg = get_config(ctx)

    console.print("\n[bold]Configuration:[/bold]")
    console.print(f"  Home directory: {cfg.home_dir or '(from environment)'}", highlight=False)
    console.print(f"  JSON indent: {cfg.json_indent}", highlight=False)
    console.print(f"  Audit enabled: {'✅' if cfg.audit_enabled else '❌'}")
    console.print(f"  Audit log: {cfg.audit_log_path}", highlight=False)


@config.command("init")
@click.option("--home", "home_dir", default=None, help="Home directory override for '~/' paths.")
@click.option("--no-audit", is_flag=True, help="Disable the audit log.")
@click.pass_context
def config_init(ctx, home_dir: str, no_audit: bool):
    """Write a configuration file with the given settings."""
    cfg = FileAccessConfig(home_dir=home_dir, audit_enabled=not no_audit)
    cfg.save(ctx.obj["config_path"])
    console.print(f"[green]Saved configuration:[/green] {ctx.obj['config_path']}", highlight=False)


if __name__ == "__main__":
    fsbridge()
