"""
Command-line interface for the random-variable toolkit.

This CLI provides access to:
- Sampling from the uniform, Gaussian, log-normal, exponential,
  Poisson and binomial distributions, with optional range bounds
- Goodness-of-fit checks of the binomial sampler
"""

import logging
import math

import click

from rvkit.core import static_random
from rvkit.diagnostics.goodness_of_fit import check_binomial_fit, check_moments
from rvkit.distributions.binomial import BinomialLongRV
from rvkit.distributions.exponential import ExpDistrRV, PoissonLongRV
from rvkit.distributions.gaussian import GaussianRV, LogNormalRV
from rvkit.distributions.uniform import UniformDoubleRV


@click.group()
@click.version_option(version="1.0.0")
@click.option("--seed", type=int, default=None, help="Seed for the random source")
@click.option("--high-quality", is_flag=True, help="Use the high-quality random source")
@click.option("--verbose", "-v", is_flag=True, help="Log debug messages")
def cli(seed, high_quality, verbose):
    """Random Variable Toolkit - bounded random variables and sample checks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if high_quality:
        static_random.maximize_quality()
    if seed is not None:
        static_random.set_seed(seed)


def sample_options(func):
    """Options shared by every sampling command."""
    func = click.option("--summary", "-s", is_flag=True, help="Print moments instead of values")(func)
    func = click.option("--open-max", is_flag=True, help="Exclude the maximum itself")(func)
    func = click.option("--open-min", is_flag=True, help="Exclude the minimum itself")(func)
    func = click.option("--max", "maximum", type=float, default=None, help="Upper bound")(func)
    func = click.option("--min", "minimum", type=float, default=None, help="Lower bound")(func)
    func = click.option("--count", "-n", type=int, default=10, show_default=True, help="Number of values")(func)
    return func


def emit(rv, count, minimum, maximum, open_min, open_max, summary):
    """Apply bounds to rv, draw count values and print them."""
    try:
        if minimum is not None:
            rv.set_minimum(minimum, not open_min)
        if maximum is not None:
            rv.set_maximum(maximum, not open_max)
        values = rv.to_array(count)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    if not summary:
        for value in values:
            click.echo(f"{value}")
        return

    click.echo(f"\nSamples:  {count}")
    if count:
        click.echo(f"  Mean:   {values.mean():>12.6f}")
        click.echo(f"  Sdev:   {values.std(ddof=1) if count > 1 else 0.0:>12.6f}")
        click.echo(f"  Min:    {values.min():>12.6f}")
        click.echo(f"  Max:    {values.max():>12.6f}")


@cli.group()
def sample():
    """Draw values from a distribution."""
    pass


@sample.command()
@click.option("--lower", "-a", type=float, default=0.0, help="Lower end of the interval")
@click.option("--upper", "-b", type=float, default=1.0, help="Upper end of the interval")
@click.option("--closed-upper", is_flag=True, help="Include the upper end")
@click.option("--open-lower", is_flag=True, help="Exclude the lower end")
@sample_options
def uniform(lower, upper, closed_upper, open_lower, **kwargs):
    """Uniform floats on an interval."""
    try:
        rv = UniformDoubleRV(lower, upper, not open_lower, closed_upper)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)
    emit(rv, **kwargs)


@sample.command()
@click.option("--mean", "-m", type=float, default=0.0, help="Mean")
@click.option("--sdev", "-d", type=float, default=1.0, help="Standard deviation")
@sample_options
def gaussian(mean, sdev, **kwargs):
    """Normally distributed floats."""
    try:
        rv = GaussianRV(mean, sdev)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)
    emit(rv, **kwargs)


@sample.command()
@click.option("--mean", "-m", type=float, required=True, help="Mean of the values")
@click.option("--sdev", "-d", type=float, required=True, help="Standard deviation of the values")
@sample_options
def lognormal(mean, sdev, **kwargs):
    """Log-normally distributed floats with a given mean and sdev."""
    try:
        rv = LogNormalRV(LogNormalRV.get_mu(mean, sdev), LogNormalRV.get_sigma(mean, sdev))
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)
    emit(rv, **kwargs)


@sample.command()
@click.option("--mean", "-m", type=float, default=1.0, help="Mean")
@sample_options
def exp(mean, **kwargs):
    """Exponentially distributed floats."""
    try:
        rv = ExpDistrRV(mean)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)
    emit(rv, **kwargs)


@sample.command()
@click.option("--mean", "-m", type=float, required=True, help="Mean")
@sample_options
def poisson(mean, **kwargs):
    """Poisson-distributed counts."""
    try:
        rv = PoissonLongRV(mean)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)
    emit(rv, **kwargs)


@sample.command()
@click.option("--prob", "-p", type=float, required=True, help="Success probability per trial")
@click.option("--trials", "-t", type=int, required=True, help="Number of trials")
@sample_options
def binomial(prob, trials, **kwargs):
    """Binomially distributed counts."""
    try:
        rv = BinomialLongRV(prob, trials)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)
    if kwargs["summary"]:
        click.echo(f"\nSampling mode: {rv.mode.value}")
    emit(rv, **kwargs)


@cli.group()
def check():
    """Run statistical checks on generated samples."""
    pass


@check.command(name="binomial")
@click.option("--prob", "-p", type=float, required=True, help="Success probability per trial")
@click.option("--trials", "-t", type=int, required=True, help="Number of trials")
@click.option("--count", "-n", type=int, default=100000, show_default=True, help="Number of samples")
def check_binomial(prob, trials, count):
    """Chi-square and moment checks of the binomial sampler."""
    try:
        rv = BinomialLongRV(prob, trials)
        values = rv.to_array(count)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    fit = check_binomial_fit(values, prob, trials)
    moments = check_moments(values, trials * prob, trials * prob * (1.0 - prob))

    click.echo(f"\nBinomial(p={prob}, n={trials}), {count} samples, mode {rv.mode.value}")
    if "chi_square" in fit.details:
        click.echo(f"  Chi-square: {fit.details['chi_square']:>10.4f}")
        click.echo(f"  p-value:    {fit.details['p_value']:>10.4f}")
    click.echo(f"  Mean:       {moments.details['sample_mean']:>10.4f} (expected {trials * prob:.4f})")
    click.echo(
        f"  Sdev:       {math.sqrt(moments.details['sample_variance']):>10.4f} "
        f"(expected {math.sqrt(trials * prob * (1.0 - prob)):.4f})"
    )

    violations = fit.violations + moments.violations
    if violations:
        for violation in violations:
            click.echo(f"  FAIL: {violation}", err=True)
        raise SystemExit(1)
    click.echo("  PASS")


if __name__ == "__main__":
    cli()
