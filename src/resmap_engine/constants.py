"""Model constants of the retention/resolution engine.

The empirical factors below come from the legacy QuickBasic optimisation
program the engine replaces. They are part of the calibrated model, not
first-principles physics, and are kept fixed.
"""

import math

# Interstitial porosity of a packed bed; mobile-phase volume = 2/3 of the
# empty column volume in the legacy model.
INTERSTITIAL_POROSITY = 2.0 / 3.0

# Peak sigma = sqrt(2/N) * tR / 2.5 (legacy empirical divisor).
PEAK_WIDTH_DIVISOR = 2.5

# Trailing factor of the legacy resolution formula.
RESOLUTION_SCALE = 2.5

# ln k saturates here instead of overflowing exp().
MAX_RETENTION_FACTOR = 1e32
LOG_MAX_RETENTION_FACTOR = math.log(MAX_RETENTION_FACTOR)

# Number of contour bands of the legacy resolution map colour scale.
RESOLUTION_BANDS = 10
