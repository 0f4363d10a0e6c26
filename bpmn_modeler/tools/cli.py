"""
BPMN Modeler CLI Interface

Command-line access to the process document core: create, validate,
check and clone BPMN 2.0 files, and inspect element templates.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from bpmn_modeler.core.config import ModelerConfig
from bpmn_modeler.core.exceptions import XMLParseError
from bpmn_modeler.core.observability import (
    LogLevel,
    ObservabilityConfig,
    ObservabilityManager,
    span,
)
from bpmn_modeler.models.element_templates import (
    get_element_template,
    get_element_types,
    get_vendor_attributes,
)
from bpmn_modeler.models.process import BPMNProcess
from bpmn_modeler.serialization import XMLSerializer
from bpmn_modeler.tools.validation import Severity, has_errors, summarize

logger = logging.getLogger(__name__)


def _read_file(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _write_output(xml: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(xml, encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)
    else:
        click.echo(xml, nl=False)


def _load_process(path: str, config: ModelerConfig) -> BPMNProcess:
    try:
        return BPMNProcess.from_xml(_read_file(path), config=config)
    except XMLParseError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "--verbose/--quiet",
    default=False,
    help="Verbose logging output",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Emit logs as JSON lines",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Record OpenTelemetry spans and print their durations to stderr",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, json_logs: bool, trace: bool) -> None:
    """BPMN Modeler CLI - create, validate and convert BPMN 2.0 processes."""
    config = ModelerConfig.from_env()
    manager = ObservabilityManager.initialize(
        ObservabilityConfig(
            service_name="bpmn-modeler-cli",
            log_level=LogLevel.DEBUG if verbose else config.log_level,
            json_logs=json_logs,
            enable_tracing=trace,
        )
    )
    if trace:
        ctx.call_on_close(lambda: _report_spans(manager))
    ctx.obj = config


def _report_spans(manager: ObservabilityManager) -> None:
    for finished in manager.span_exporter.get_finished_spans():
        duration_ms = (finished.end_time - finished.start_time) / 1e6
        click.echo(f"span {finished.name}: {duration_ms:.2f} ms", err=True)


@cli.command()
@click.option("--name", "-n", type=str, help="Process name")
@click.option("--id", "process_id", type=str, help="Explicit process ID")
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.pass_obj
def new(
    config: ModelerConfig, name: Optional[str], process_id: Optional[str], output: Optional[str]
) -> None:
    """Create a new process containing a single start event."""
    process = BPMNProcess(process_id, config=config)
    if name:
        process.name = name
    _write_output(process.to_xml(), output)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", is_flag=True, help="Print diagnostics as JSON")
@click.option("--strict", is_flag=True, help="Treat warnings as failures")
@click.pass_obj
def validate(config: ModelerConfig, input_file: str, json_output: bool, strict: bool) -> None:
    """
    Import a BPMN file and report validation diagnostics.

    \b
    Exit status is 1 when any error is reported (or any warning with --strict).

    \b
    Examples:
        bpmn-modeler validate order.bpmn
        bpmn-modeler validate order.bpmn --json-output --strict
    """
    with span("cli.validate", {"file": input_file}):
        process = _load_process(input_file, config)
        diagnostics = process.validate()

    if json_output:
        click.echo(
            json.dumps(
                {
                    "processId": process.id,
                    "summary": summarize(diagnostics),
                    "diagnostics": [d.to_dict() for d in diagnostics],
                },
                indent=2,
            )
        )
    else:
        for diagnostic in diagnostics:
            scope = f" [{diagnostic.element_id}]" if diagnostic.element_id else ""
            click.echo(f"{diagnostic.severity.value.upper()}{scope}: {diagnostic.message}")
        counts = summarize(diagnostics)
        click.echo(f"{counts['error']} error(s), {counts['warning']} warning(s)")

    failed = has_errors(diagnostics) or (
        strict and any(d.severity == Severity.WARNING for d in diagnostics)
    )
    if failed:
        sys.exit(1)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def check(config: ModelerConfig, input_file: str) -> None:
    """Check that a file is well-formed XML (no schema validation)."""
    try:
        XMLSerializer(config).validate(_read_file(input_file))
    except XMLParseError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"{input_file}: well-formed")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.pass_obj
def clone(config: ModelerConfig, input_file: str, output: Optional[str]) -> None:
    """Re-export a process with freshly generated IDs."""
    with span("cli.clone", {"file": input_file}):
        process = _load_process(input_file, config)
        cloned = process.clone()
    logger.debug(f"Cloned {process.id} as {cloned.id}")
    _write_output(cloned.to_xml(), output)


@cli.command()
@click.argument("element_type")
def template(element_type: str) -> None:
    """Show the default template and Camunda attributes for ELEMENT_TYPE."""
    if ":" not in element_type:
        element_type = f"bpmn:{element_type}"
    payload = get_element_template(element_type).model_dump()
    payload["vendorAttributes"] = get_vendor_attributes(element_type)
    click.echo(json.dumps(payload, indent=2))


@cli.command()
def types() -> None:
    """List the known element types."""
    for element_type in get_element_types():
        click.echo(element_type)


if __name__ == "__main__":
    cli()
