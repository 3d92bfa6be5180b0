"""
Physical constants for stellar spectral synthesis.

All constants are in CGS units unless otherwise specified.
For convenience, some constants are also provided in eV-based units.
"""

# ============================================================================
# Fundamental Constants
# ============================================================================

# Boltzmann constant
KBOLTZ_CGS = 1.380649e-16  # erg/K
KBOLTZ_EV = 8.617333262145e-5  # eV/K

# Planck constant
HPLANCK_CGS = 6.62607015e-27  # erg·s
HPLANCK_EV = 4.135667696e-15  # eV·s

# Speed of light
C_CGS = 2.99792458e10  # cm/s

# Electron properties
ELECTRON_MASS_CGS = 9.1093897e-28  # g
ELECTRON_CHARGE_CGS = 4.80320425e-10  # statcoulomb (cm^3/2 g^1/2 s^-1)

# Atomic mass unit
AMU_CGS = 1.6605402e-24  # g

# ============================================================================
# Atomic Physics Constants
# ============================================================================

# Bohr radius (2018 CODATA)
BOHR_RADIUS_CGS = 5.29177210903e-9  # cm

# Ionization energy of hydrogen, as used in the hydrogen opacity routines
RYDBERG_H_EV = 13.595  # eV

# Rydberg constant for hydrogen (reduced-mass corrected)
RYDBERG_H_CM = 109677.58  # cm^-1

# Thomson scattering cross section
SIGMA_THOMSON_CGS = 6.6524587321e-25  # cm^2

# ============================================================================
# Conversion Factors
# ============================================================================

# Energy conversions
EV_TO_ERG = 1.602176634e-12
ERG_TO_EV = 1.0 / EV_TO_ERG

# Length conversions
ANGSTROM_TO_CM = 1e-8
CM_TO_ANGSTROM = 1e8

# Velocity conversions
KM_S_TO_CM_S = 1e5

# ============================================================================
# Synthesis Reference Values
# ============================================================================

# Wavelength at which the reference (anchor) opacity is evaluated
REFERENCE_WAVELENGTH_CM = 5e-5  # 5000 Å, vacuum

# Temperature at which line broadening parameters are tabulated
BROADENING_REFERENCE_T = 10000.0  # K
