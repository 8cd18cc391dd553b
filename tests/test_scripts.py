import pytest
import typer

from pcdm_modelling.scripts import pcdm_displacement


def test_pcdm_displacement(capsys: pytest.CaptureFixture):
    """The script reports the number of points and summarises each component."""
    pcdm_displacement.pcdm_displacement(
        east_range=(-1.0, 0.5, 1.0),
        north_range=(-1.0, 1.0, 1.0),
        source=(0.0, 0.0),
        depth=2.0,
        omega=(0.0, 0.0, 0.0),
        dv=(1e-3, 1e-3, 1e-3),
        nu=0.25,
    )
    output = capsys.readouterr().out
    assert "Computed displacements for 15 points." in output
    for column in ["ue", "un", "uv"]:
        assert column in output


def test_pcdm_displacement_invalid_parameters(capsys: pytest.CaptureFixture):
    with pytest.raises(typer.Exit) as exit_info:
        pcdm_displacement.pcdm_displacement(
            east_range=(-1.0, 0.5, 1.0),
            north_range=(-1.0, 1.0, 1.0),
            depth=2.0,
            dv=(1e-3, -1e-3, 0.0),
        )
    assert exit_info.value.exit_code == 1
    assert "must have the same sign" in capsys.readouterr().err
