"""pCDM Modelling

Surface displacements of a point Compound Dislocation Model (pCDM) in an
elastic half-space.

Point Tensile Dislocations
--------------------------

`pcdm_modelling.ptd` evaluates the closed-form surface displacement of a
single point tensile dislocation (Okada, 1985) for arbitrary strike and dip.

Point Compound Dislocation Models
---------------------------------

A pCDM is three mutually orthogonal point tensile dislocations rotated as a
rigid triad (Nikkhoo et al., 2017). The `pcdm_modelling.backend` module
derives the orientation of each dislocation, superposes their
displacements, and provides `PCDMBackend`, which tracks whether the results
are up to date with the observation points (`pcdm_modelling.coordinates`)
and source parameters (`pcdm_modelling.parameters`).

Background Computation
----------------------

`pcdm_modelling.model.PCDMModel` caches the results of a named
parametrization and computes them on a worker thread."""
