"""Surface displacements of a point tensile dislocation (PTD) in an elastic half-space.

The closed-form solution follows Okada (1985), in the form used by
Nikkhoo et al. (2017) for the point Compound Dislocation Model.

References
----------
Okada, Y. (1985). Surface deformation due to shear and tensile faults in a
half-space. Bulletin of the Seismological Society of America, 75(4), 1135-1154.

Nikkhoo, M., Walter, T. R., Lundgren, P. R., & Prats-Iraola, P. (2017).
Compound dislocation models (CDMs) for volcano deformation analyses.
Geophysical Journal International, 208(2), 877-894.
"""

import numpy as np
import numpy.typing as npt


def _rotation_2d(angle: float) -> np.ndarray:
    """2D counter-clockwise rotation matrix for `angle` (radians)."""
    return np.array(
        [
            [np.cos(angle), -np.sin(angle)],
            [np.sin(angle), np.cos(angle)],
        ]
    )


def ptd_surface_displacement(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    origin: npt.ArrayLike,
    depth: float,
    strike: float,
    dip: float,
    potency: float,
    nu: float,
) -> np.ndarray:
    """Compute the surface displacements of a point tensile dislocation.

    Parameters
    ----------
    x : array-like
        Easting of the observation points.
    y : array-like
        Northing of the observation points. Must have the same length as `x`.
    origin : array-like
        The (easting, northing) of the dislocation.
    depth : float
        Depth of the dislocation (positive down).
    strike : float
        Strike of the dislocation (degrees).
    dip : float
        Dip of the dislocation (radians).
    potency : float
        Potency of the dislocation, in units of volume.
    nu : float
        Poisson's ratio of the half-space.

    Returns
    -------
    np.ndarray
        Array of shape (3, n) with the east, north and vertical displacement
        at each of the n observation points.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise ValueError("x and y must have the same shape.")

    xy = np.vstack([x.ravel() - origin[0], y.ravel() - origin[1]])

    beta = np.radians(strike - 90)
    rotation = _rotation_2d(beta)
    a_x, a_y = rotation @ xy

    d = depth
    a_x_sq = a_x**2
    a_y_sq = a_y**2
    r = np.sqrt(a_x_sq + a_y_sq + d**2)
    q = a_y * np.sin(dip) - d * np.cos(dip)

    nu_scaled = 1 - 2 * nu

    r_cb = r**3
    rd = r + d
    rd_sq = rd**2
    rd_cb = rd**3

    i1 = nu_scaled * a_y * (1 / r / rd_sq - a_x_sq * (3 * r + d) / r_cb / rd_cb)
    i2 = nu_scaled * a_x * (1 / r / rd_sq - a_y_sq * (3 * r + d) / r_cb / rd_cb)
    i3 = nu_scaled * a_x / r_cb - i2
    i5 = nu_scaled * (1 / r / rd - a_x_sq * (2 * r + d) / r_cb / rd_sq)

    sin_dip_sq = np.sin(dip) ** 2
    q_term = 3 * q**2 / r**5
    # For a PTD the moment is M0 = potency * mu.
    scale = potency / (2 * np.pi)

    ue = scale * (a_x * q_term - i3 * sin_dip_sq)
    un = scale * (a_y * q_term - i1 * sin_dip_sq)
    uv = scale * (d * q_term - i5 * sin_dip_sq)

    # Vertical displacements are unaffected by the horizontal rotation.
    ue, un = rotation.T @ np.vstack([ue, un])
    return np.vstack([ue, un, uv])
