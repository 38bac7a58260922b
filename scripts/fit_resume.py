#!/usr/bin/env python3
"""
Resume Auto-Fit CLI

Fits resume content to a single A4 page and inspects the density scale model.

Commands:
    fit    - Lay out a resume and run the auto-fit engine to a stable scale
    scales - Show the scale configuration for a density
    css    - Print the style declarations for a density

Examples:\n

    fit_resume.py fit data/resume.yaml                 # Fit a resume YAML

    fit_resume.py fit --sample                         # Fit the built-in sample resume

    fit_resume.py fit data/resume.yaml --hide-projects # Fit without the projects section

    fit_resume.py scales 0.25                          # Scale factors at density 0.25

    fit_resume.py css 0.5                              # CSS declarations at baseline
"""

from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from pagefit.contexts.content import InvalidResumeDataError, default_resume, load_resume
from pagefit.contexts.fitting import FitStatus, fit_resume
from pagefit.contexts.rendering import render_style_declarations
from pagefit.contexts.scaling import InvalidScaleBoundsError, compute_scales, load_fit_config

app = typer.Typer(
    help="Fit resume content to a single page and inspect the density scale model",
    add_completion=False,
    invoke_without_command=True,
)

STATUS_COLORS = {
    FitStatus.FIT: typer.colors.GREEN,
    FitStatus.UNDERFILL: typer.colors.YELLOW,
    FitStatus.OVERFLOW: typer.colors.RED,
}


def _load_config(config_path: Optional[Path]):
    try:
        return load_fit_config(config_path)
    except (FileNotFoundError, InvalidScaleBoundsError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("fit")
def fit_command(
    resume_path: Annotated[
        Optional[Path],
        typer.Argument(help="Resume YAML file"),
    ] = None,
    sample: Annotated[
        bool,
        typer.Option("--sample", help="Use the built-in sample resume"),
    ] = False,
    hide_projects: Annotated[
        bool,
        typer.Option("--hide-projects", help="Fit with the projects section hidden"),
    ] = False,
    density: Annotated[
        Optional[float],
        typer.Option(
            "--density",
            "-d",
            help="Manual density (0-1); bypasses the solver",
            min=0.0,
            max=1.0,
        ),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Alternative scale_bounds.yaml"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on the console"),
    ] = False,
    show_css: Annotated[
        bool,
        typer.Option("--css", help="Print the resulting style declarations"),
    ] = False,
):
    """
    Fit a resume to one page.

    Lays the resume out on an in-memory A4 surface, runs the fit controller
    until the applied scale stops changing, and reports the result.

    Examples:\n

        $ fit_resume.py fit data/resume.yaml                  # Fit resume

        $ fit_resume.py fit --sample --density 0.3            # Manual density

        $ fit_resume.py fit data/resume.yaml --css            # Also print CSS
    """
    if resume_path is None and not sample:
        typer.secho("Error: pass a resume YAML or --sample\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    fit_config = _load_config(config_path)

    if sample:
        resume = default_resume()
        label = "sample resume"
    else:
        try:
            resume = load_resume(resume_path)
        except (FileNotFoundError, InvalidResumeDataError) as e:
            typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        label = str(resume_path)

    typer.secho(f"\nFitting: {label}", fg=typer.colors.BLUE, bold=True)
    typer.echo("")

    projects_visible = resume.show_projects and not hide_projects
    session = fit_resume(
        resume,
        projects_visible=projects_visible,
        manual_density=density,
        config=fit_config,
        console_level="DEBUG" if verbose else "INFO",
    )

    typer.echo("")
    if session.manual:
        typer.secho(
            f"Manual density {session.config.density:.2f}", fg=typer.colors.BLUE, bold=True
        )
    elif session.result is not None:
        result = session.result
        typer.secho(
            f"Status: {result.status.value}",
            fg=STATUS_COLORS[result.status],
            bold=True,
        )
        typer.echo(f"  Content height: {result.content_height:.1f}px")
        typer.echo(f"  Target height:  {result.target_height:.1f}px")
        typer.echo(f"  Fill ratio:     {result.fill_ratio:.1%}")
        typer.echo(f"  Density:        {session.config.density:.2f}")
        typer.echo(f"  Cycles:         {session.cycles}")

    if session.fits_page:
        typer.secho("✓ Content fits on one page", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho(
            f"✗ Content overflows the page by {session.overflow_px:.1f}px",
            fg=typer.colors.RED,
            bold=True,
        )

    if show_css:
        typer.echo("")
        typer.echo(session.style_declarations())

    if session.log_dir:
        typer.echo(f"  Log: {session.log_dir / 'fit.log'}")
    typer.echo("")

    raise typer.Exit(code=0 if session.fits_page else 1)


@app.command("scales")
def scales_command(
    density: Annotated[
        float,
        typer.Argument(help="Density between 0 (compact) and 1 (expanded)"),
    ],
    hide_projects: Annotated[
        bool,
        typer.Option("--hide-projects", help="Apply the hidden-projects work expansion boost"),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Alternative scale_bounds.yaml"),
    ] = None,
):
    """
    Show the scale configuration for a density.

    Examples:\n

        $ fit_resume.py scales 0                     # Maximum compaction

        $ fit_resume.py scales 0.9 --hide-projects   # Expanded, projects hidden
    """
    fit_config = _load_config(config_path)
    config = compute_scales(
        density, not hide_projects, bounds=fit_config.bounds, boosts=fit_config.boosts
    )

    typer.secho(f"\nDensity {config.density:.2f}", fg=typer.colors.BLUE, bold=True)
    for name, value in asdict(config).items():
        if name == "density":
            continue
        typer.echo(f"  {name:<22} {value:.4f}")
    typer.echo("")


@app.command("css")
def css_command(
    density: Annotated[
        float,
        typer.Argument(help="Density between 0 (compact) and 1 (expanded)"),
    ],
    hide_projects: Annotated[
        bool,
        typer.Option("--hide-projects", help="Apply the hidden-projects work expansion boost"),
    ] = False,
    selector: Annotated[
        str,
        typer.Option("--selector", "-s", help="CSS selector for the declaration block"),
    ] = ".resume-wrapper",
):
    """
    Print CSS custom property declarations for a density.

    Examples:\n

        $ fit_resume.py css 0.5                          # Baseline declarations

        $ fit_resume.py css 0 --selector ".page"         # Custom selector
    """
    config = compute_scales(density, not hide_projects)
    typer.echo(render_style_declarations(config, selector=selector), nl=False)


if __name__ == "__main__":
    app()
