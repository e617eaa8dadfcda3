"""
oligosim CLI - Command Line Interface for PCR random access simulation.

Usage:
    oligosim <command> [options]
"""

import logging

import click

from oligosim import __version__


def _configure_logging(verbose: bool, log_file=None):
    from oligosim.utils.logging_utils import setup_logger
    setup_logger("oligosim", log_file=log_file, level=logging.DEBUG if verbose else logging.INFO)


@click.group()
@click.version_option(version=__version__, prog_name="oligosim")
def main():
    """oligosim - PCR amplification and random access simulator for DNA storage.

    Use 'oligosim <command> --help' for detailed usage of each command.
    """
    pass


@main.command("random-access")
@click.option("-o", "--output", required=True, help="Output directory")
@click.option("-n", "--num-oligos", "n", type=int, help="Number of distinct oligos")
@click.option("-r", "--redundancy", type=int, help="Initial copies per oligo")
@click.option("-p", "--target-percent", type=float, help="Targeted fraction of the pool (0-1)")
@click.option("-c", "--cycles", type=int, help="PCR cycles per stage")
@click.option("--pcr-eff", type=float, help="Target amplification efficiency (1-2)")
@click.option("--spurious-eff", type=float, help="Off-target amplification efficiency (1-2)")
@click.option("--nested", default=0, type=int, help="Additional nested stages")
@click.option("--threshold-ratio", type=float, help="Detection threshold as fraction of mean")
@click.option("--mode", type=click.Choice(["stochastic", "deterministic"]),
              help="Amplification model")
@click.option("--seed", type=int, help="Random seed")
@click.option("--config", "config_file", help="Config file (YAML/JSON)")
@click.option("--save-pools", is_flag=True, help="Write amplified pools as .npz")
@click.option("-sample", "--sample", default="", help="Sample prefix for output files")
@click.option("--log-file", help="Also log to this file")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def random_access(output, n, redundancy, target_percent, cycles, pcr_eff, spurious_eff,
                  nested, threshold_ratio, mode, seed, config_file, save_pools,
                  sample, log_file, verbose):
    """Simulate random access (optionally nested) PCR on a storage pool.

    Reports false negatives (targets below the detection threshold) and
    false positives (off-target oligos above it) for every stage.
    """
    from oligosim.simulate.access import run_random_access_simulation
    from oligosim.simulate.pcr.errors import OligoSimError

    _configure_logging(verbose, log_file)
    try:
        outcomes = run_random_access_simulation(
            output_dir=output,
            n=n,
            redundancy=redundancy,
            target_percent=target_percent,
            cycles=cycles,
            pcr_eff=pcr_eff,
            spurious_eff=spurious_eff,
            nested=nested,
            threshold_ratio=threshold_ratio,
            mode=mode,
            seed=seed,
            config_file=config_file,
            save_pools=save_pools,
            sample=sample,
        )
    except OligoSimError as e:
        raise click.ClickException(str(e))

    for o in outcomes:
        click.echo(
            f"stage {o.stage}\tFN {o.false_negative_count} ({o.false_negative_percent:.2f}%)"
            f"\tFP {o.false_positive_count} ({o.false_positive_percent:.2f}%)"
        )


@main.command()
@click.option("-n", "--num-oligos", "n", default=10, help="Number of distinct oligos")
@click.option("-r", "--redundancy", default=10, help="Initial copies per oligo")
@click.option("-e", "--efficiency", default=2.0, help="Amplification efficiency (1-2)")
@click.option("-c", "--cycles", default=10, help="PCR cycles")
@click.option("--threshold-ratio", default=0.1, help="Detection threshold as fraction of mean")
@click.option("--mode", type=click.Choice(["stochastic", "deterministic"]),
              default="deterministic", help="Amplification model")
@click.option("--seed", type=int, help="Random seed")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def amplify(n, redundancy, efficiency, cycles, threshold_ratio, mode, seed, verbose):
    """Amplify a whole pool (no random access) and report detection."""
    from oligosim.simulate.access import run_amplification
    from oligosim.simulate.pcr.errors import OligoSimError

    _configure_logging(verbose)
    try:
        summary = run_amplification(
            n=n,
            redundancy=redundancy,
            efficiency=efficiency,
            cycles=cycles,
            threshold_ratio=threshold_ratio,
            mode=mode,
            seed=seed,
        )
    except OligoSimError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"mean {summary.mean:g}\tthreshold {summary.threshold:g}"
        f"\tFN {summary.false_negative_count} ({summary.false_negative_percent:.2f}%)"
    )


if __name__ == "__main__":
    main()
