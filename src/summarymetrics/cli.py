"""Command-line interface for summarymetrics."""

import json
import logging
import sys
from pathlib import Path

import click
import yaml

from summarymetrics import __version__
from summarymetrics.metrics.export import write_samples_csv
from summarymetrics.utils.config_validator import ConfigurationError, validate_and_fix_config
from summarymetrics.workload import WorkloadSimulator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

EXAMPLE_CONFIG = {
    "simulation": {
        "max_simulation_time": 60,
        "random_seed": 42,
    },
    "summary": {
        "quantiles": [0.5, 0.95, 0.99],
        "reservoir_size": 1028,
        "namespace": "demo",
    },
    "workload": {
        "server_capacity": 4,
        "client_profiles": [
            {
                "profile_name": "interactive",
                "inter_arrival_time_dist_config": {"type": "Exponential", "rate": 20.0},
                "service_time_dist_config": {"type": "LogNormal", "mean": -4.0, "sigma": 0.5},
                "request_size_dist_config": {"type": "Uniform", "low": 200, "high": 4096, "is_int": True},
            },
            {
                "profile_name": "batch",
                "inter_arrival_time_dist_config": {"type": "Exponential", "rate": 2.0},
                "service_time_dist_config": {"type": "Gamma", "shape": 2.0, "scale": 0.1},
                "request_size_dist_config": {"type": "Pareto", "shape": 1.5, "scale": 10000},
            },
        ],
    },
}


@click.group()
@click.version_option(version=__version__, prog_name="summarymetrics")
def cli():
    """summarymetrics: Summary metrics with sampled quantiles."""
    pass


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    help="Logging level"
)
@click.option("--output-csv", "-o", default=None, help="Write collected samples to this CSV file")
def run(config_file: str, format: str, log_level: str, output_csv: str):
    """Run a simulated workload and print its summary samples."""
    logging.getLogger().setLevel(getattr(logging, log_level))

    click.echo(f"Loading configuration from {config_file}...")

    try:
        if format == "yaml":
            simulator = WorkloadSimulator.from_yaml_file(config_file)
        else:
            simulator = WorkloadSimulator.from_json_file(config_file)

        click.echo("Starting simulation...")
        report = simulator.run()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("\nSimulation completed!")
    click.echo(f"Completed requests: {report['simulation']['completed']:.0f}")
    click.echo(f"Throughput: {report['simulation']['requests_per_second']:.2f} req/s")
    for family in simulator.families():
        click.echo(f"\n# {family.name} ({family.type.value}): {family.documentation}")
        for sample in family.samples:
            labels = ",".join(f'{k}="{v}"' for k, v in sample.labels.items())
            click.echo(f"{sample.name}{{{labels}}} {sample.value:.6g}")

    if output_csv:
        path = write_samples_csv(simulator.families(), output_csv)
        click.echo(f"\nSamples written to {path}")


@cli.command()
@click.option(
    "--output", "-o", default="example_config.yaml",
    help="Output file path"
)
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
def generate_config(output: str, format: str):
    """Generate an example simulation configuration file."""
    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        if format == "yaml":
            yaml.dump(EXAMPLE_CONFIG, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(EXAMPLE_CONFIG, f, indent=2)

    click.echo(f"Generated example configuration at {output_path}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
def validate(config_file: str):
    """Validate a configuration file without running the simulation."""
    click.echo(f"Validating configuration: {config_file}")

    is_valid, errors, _ = validate_and_fix_config(config_file)

    if is_valid:
        click.echo(click.style("✓ Configuration is valid", fg="green"))
    else:
        click.echo(click.style(f"✗ Configuration has {len(errors)} errors:", fg="red"))
        for i, error in enumerate(errors[:20], 1):
            click.echo(f"  {i}. {error}")
        if len(errors) > 20:
            click.echo(f"  ... and {len(errors) - 20} more errors")

    sys.exit(0 if is_valid else 1)


if __name__ == "__main__":
    cli()
