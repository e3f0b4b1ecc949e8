"""
CLI integration for code generation functionality.

Provides the `crategen` command line interface.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from . import (
    generate_code,
    get_protocol_info,
    list_supported_protocols,
    load_config,
    convert_service_definition,
    GeneratorConfig,
    GeneratorError,
    Service,
    UnknownProtocolError,
)
from .core.config import ConfigError, get_config_manager
from ..logging_config import get_logger, setup_logging
from ..utils import DefinitionLoaderError, load_definition

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create the crategen argument parser."""
    parser = argparse.ArgumentParser(
        prog="crategen",
        description="Generate a Rust client module from a botocore service definition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  crategen dynamodb-2012-08-10.json -o dynamodb.rs
  crategen --url https://example.com/sqs-2012-11-05.json --name SQS
  crategen --list-protocols
  crategen --protocol-info rest-xml
        """.strip(),
    )

    # Input options (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument(
        "definition", nargs="?", help="Service definition JSON file"
    )
    input_group.add_argument("--url", help="URL to fetch the service definition from")

    parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    parser.add_argument("--config", help="Configuration file path (JSON)")
    parser.add_argument(
        "--name", help="Service name (default: serviceAbbreviation from metadata)"
    )
    parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't copy documentation into the generated code",
    )

    # Informational commands
    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-protocols",
        action="store_true",
        help="List supported protocols and exit",
    )
    info_group.add_argument(
        "--protocol-info",
        metavar="PROTOCOL",
        help="Show detailed info about a protocol and exit",
    )

    # Diagnostics
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show generation result metadata",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the crategen command line.

    Args:
        argv: Arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = create_parser().parse_args(argv)
    setup_logging(args.log_level)
    return handle_codegen_command(args)


def handle_codegen_command(args: argparse.Namespace) -> int:
    """
    Handle code generation from parsed CLI arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        # Handle informational commands first
        if args.list_protocols:
            return _list_protocols()

        if args.protocol_info:
            return _show_protocol_info(args.protocol_info)

        # Require input
        if not (args.definition or args.url):
            console.print("[red]✗[/red] Input source required (definition file or --url)")
            return 1

        service = _get_service(args)
        config = _build_config(args, service)

        return _generate_and_output(service, config, args)

    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _list_protocols() -> int:
    """List supported protocols with details."""
    table = Table(
        title="📋 Supported Protocols", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Protocol", style="bold green", no_wrap=True)
    table.add_column("Generator", style="cyan")
    table.add_column("Errors", style="dim")
    table.add_column("Aliases", style="blue")

    for protocol in list_supported_protocols():
        info = get_protocol_info(protocol)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(
            f"🔧 {protocol}", info["generator"], info["error_types"], aliases
        )

    console.print()
    console.print(table)
    console.print()

    # Add usage hint
    console.print(
        Panel(
            "[bold]Usage:[/bold] crategen [dim]service.json[/dim] -o [cyan]service.rs[/cyan]\n"
            "[bold]Info:[/bold] crategen --protocol-info [cyan]PROTOCOL[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )

    return 0


def _show_protocol_info(protocol: str) -> int:
    """Show detailed information about a specific protocol."""
    try:
        info = get_protocol_info(protocol)
    except UnknownProtocolError:
        console.print(f"[red]✗ Protocol '{protocol}' is not supported[/red]")
        console.print("[dim]Use --list-protocols to see available options[/dim]")
        return 1

    info_text = f"""[bold]Protocol:[/bold] {info['name']}
[bold]Generator Class:[/bold] {info['generator']}
[bold]Error Types:[/bold] {info['error_types']} ({info['error_style']} style)
[bold]Timestamp Type:[/bold] {info['timestamp_type']}
[bold]Module:[/bold] {info['module']}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(info_text, title=f"🔧 {info['name']} backend", border_style="green")
    )

    # Configuration defaults for the protocol
    config = load_config(info["name"])
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")

    config_table.add_row("Crate Name", config.crate_name)
    config_table.add_row("Add Comments", str(config.add_comments))
    for key, value in sorted(config.custom.items()):
        config_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(config_table)

    return 0


def _get_service(args: argparse.Namespace) -> Service:
    """Load the definition and convert it to a Service."""
    try:
        if args.definition:
            source, definition = load_definition(file_path=args.definition)
        else:
            source, definition = load_definition(url=args.url)
    except (DefinitionLoaderError, FileNotFoundError) as e:
        raise CLIError(f"Failed to load input: {e}")

    try:
        service = convert_service_definition(definition, args.name)
    except GeneratorError as e:
        raise CLIError(f"Invalid service definition {source}: {e}")

    logger.info("Loaded service %s (%s) from %s", service.name, service.protocol, source)
    return service


def _build_config(args: argparse.Namespace, service: Service) -> GeneratorConfig:
    """Build configuration from CLI arguments."""
    config_dict = {}

    # Override with CLI arguments
    if args.no_comments:
        config_dict["add_comments"] = False

    if args.output:
        config_dict["output_file"] = args.output

    try:
        config = load_config(
            service.protocol, custom_config=config_dict, config_file=args.config
        )
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}")

    for warning in get_config_manager().validate_config(config):
        console.print(f"[yellow]⚠️  {warning}[/yellow]")

    return config


def _generate_and_output(
    service: Service, config: GeneratorConfig, args: argparse.Namespace
) -> int:
    """Generate code and handle output with rich formatting."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        gen_task = progress.add_task(
            f"[green]Generating {service.name} ({service.protocol})...", total=None
        )
        result = generate_code(service, config)
        progress.remove_task(gen_task)

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    # Output code
    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            console.print(f"[red]✗ Failed to write to {output_path}:[/red] {e}")
            return 1
        console.print(
            f"[green]✓[/green] Generated {service.name} client saved to [cyan]{output_path}[/cyan]"
        )
    elif sys.stdout.isatty():
        top_border = "═" * 30
        console.print(
            f"[green]{top_border} 📄 Generated {service.name} Module {top_border}[/green]\n"
        )
        console.print(Syntax(result.code, "rust", theme="monokai"))
    else:
        sys.stdout.write(result.code)

    # Show metadata if verbose
    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )

        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))

        console.print()
        console.print(metadata_table)

    # Show warnings with rich formatting
    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
