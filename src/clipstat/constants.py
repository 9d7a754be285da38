"""Tunable constants shared by the statistics routines."""

# Mode estimation.
MODE_MIN_Q = 0.01
MODE_MAX_Q = 0.55
MODE_SYM_LOW_Q = 0.01
MODE_GOLDEN_RATIO = 1.618034
MODE_TWO_TAKE_GR = 0.38197
MODE_TOLERANCE = 0.01
MODE_GOOD_SYMMETRY = 0.2
MODE_MAX_CHECKED = 1000

# Sigma/MAD clipping.
CLIP_MAX_CONVERGE = 50

# Flat cumulative-frequency-plot outlier detection.
FLAT_CFP_STRIDE = 2
FLAT_CFP_MIN_STD = 1e-6
