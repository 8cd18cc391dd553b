"""Compute pCDM surface displacements on a regular grid and summarise them."""

import logging
from typing import Annotated

import typer

from pcdm_modelling import coordinates
from pcdm_modelling.backend import PCDMBackend, State
from pcdm_modelling.parameters import Parameters, PointCDMParameters


def pcdm_displacement(
    east_range: Annotated[
        tuple[float, float, float],
        typer.Option(help="Easting grid as min, step, max."),
    ] = (-7.0, 0.1, 7.0),
    north_range: Annotated[
        tuple[float, float, float],
        typer.Option(help="Northing grid as min, step, max."),
    ] = (-5.0, 0.1, 5.0),
    source: Annotated[
        tuple[float, float], typer.Option(help="Source easting and northing.")
    ] = (0.0, 0.0),
    depth: Annotated[float, typer.Option(help="Source depth (positive down).")] = 1.0,
    omega: Annotated[
        tuple[float, float, float],
        typer.Option(help="Clockwise rotation about x, y, z (degrees)."),
    ] = (0.0, 0.0, 0.0),
    dv: Annotated[
        tuple[float, float, float],
        typer.Option(help="Potencies of the dislocations normal to x, y, z."),
    ] = (0.0, 0.0, 0.0),
    nu: Annotated[float, typer.Option(help="Poisson's ratio.")] = 0.25,
    verbose: Annotated[bool, typer.Option(help="Log computation steps.")] = False,
):
    """Compute the surface displacement of a pCDM on a grid of points."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    grid = coordinates.regular_grid(*east_range, *north_range)
    backend = PCDMBackend()
    backend.set_horizontal_coords(grid)
    backend.set_parameters(
        Parameters(
            PointCDMParameters(
                horizontal_coord=source, depth=depth, omega=omega, dv=dv
            ),
            nu,
        )
    )
    if backend.run() != State.RESULTS_READY:
        typer.echo(f"Invalid parameters: {backend.error_message}", err=True)
        raise typer.Exit(code=1)

    results = backend.take_results().to_dataframe()
    typer.echo(f"Computed displacements for {len(results)} points.")
    typer.echo(results.describe().to_string())


def main():
    typer.run(pcdm_displacement)


if __name__ == "__main__":
    main()
