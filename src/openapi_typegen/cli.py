"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from openapi_typegen.configuration import (
    DEFAULT_CONFIG_FILENAME,
    SCHEMA_TYPES,
    NormalizationOptions,
    write_placeholder_configuration,
)
from openapi_typegen.generation_run import (
    GenerationError,
    GenerationRequest,
    execute_generation_run,
    inspect_schema,
)


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="openapi-typegen")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Generate typed models and decoders from OpenAPI and JSON-Schema documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML generation configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML generation configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="generate")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML generation configuration file",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Write into this directory instead of the configured output directories",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Load and normalize the document without writing any file.",
)
def generate(config_path: str, output_dir: str | None, dry_run: bool) -> None:
    """Generate models, schema, decoders and meta modules."""
    try:
        outcome = execute_generation_run(
            GenerationRequest(config_path=config_path, output_dir=output_dir, dry_run=dry_run)
        )
    except GenerationError as exc:
        raise CliError(str(exc)) from exc
    if outcome.dry_run:
        click.echo(f"{len(outcome.definition_names)} definitions normalized (dry run)")
        return
    for written in outcome.written_files:
        click.echo(str(written))


@cli.command(name="inspect")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the OpenAPI or custom schema document",
)
@click.option(
    "--type",
    "schema_type",
    default="yaml",
    show_default=True,
    type=click.Choice(SCHEMA_TYPES),
    help="Input document format",
)
@click.option(
    "--webhooks/--no-webhooks",
    "enable_webhooks",
    default=False,
    show_default=True,
    help="Turn OpenAPI 3.1 webhooks into definitions.",
)
@click.option(
    "--fallback-to-openapi30",
    is_flag=True,
    default=False,
    help="Process unsupported versions with OpenAPI 3.0 semantics.",
)
@click.option(
    "--discriminators",
    "enable_enhanced_discriminator",
    is_flag=True,
    default=False,
    help="Infer missing OpenAPI 3.1 discriminator mappings.",
)
def inspect(
    schema_path: str,
    schema_type: str,
    enable_webhooks: bool,
    fallback_to_openapi30: bool,
    enable_enhanced_discriminator: bool,
) -> None:
    """Print what normalization does to a document."""
    options = NormalizationOptions(
        enable_webhooks=enable_webhooks,
        fallback_to_openapi30=fallback_to_openapi30,
        enable_enhanced_discriminator=enable_enhanced_discriminator,
    )
    try:
        schema_set = inspect_schema(schema_path, schema_type, options)
    except GenerationError as exc:
        raise CliError(str(exc)) from exc

    report = schema_set.report
    click.echo(f"mode: {report.mode.value}")
    click.echo(f"dialect: {schema_set.dialect}")
    click.echo(f"definitions: {', '.join(schema_set.definitions) or '-'}")
    if schema_set.webhook_definitions:
        click.echo(f"webhook definitions: {', '.join(schema_set.webhook_definitions)}")
    for outcome in report.passes:
        status = "transformed" if outcome.was_transformed else "unchanged"
        click.echo(f"pass {outcome.name}: {status}")
    click.echo(f"const values: {len(report.const_values)}")
    click.echo(f"tuples: {len(report.tuples)}")
    click.echo(f"conditionals: {len(report.conditional_patterns)}")
    click.echo(f"discriminators: {len(report.discriminators)}")
    for issue in report.issues:
        click.echo(f"issue: {issue}")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
