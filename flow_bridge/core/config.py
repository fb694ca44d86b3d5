"""
Configuration constants for Flow Bridge

This module contains all configuration parameters that users may need to customize
for their headband and for tuning the flow state heuristics.
"""

from typing import Dict, Tuple

# ============================================================================
# HARDWARE CONFIGURATION
# ============================================================================

SAMPLE_RATE = 256                 # Muse sampling rate (Hz)
N_CHANNELS = 4                    # TP9, AF7, AF8, TP10
CHANNEL_NAMES = ["TP9", "AF7", "AF8", "TP10"]
SAMPLES_PER_PACKET = 12           # Samples per channel in one EEG notification

# ============================================================================
# SPECTRAL ANALYSIS
# ============================================================================

FFT_SIZE = 256                    # Transform window (must be a power of two)
HIGH_PASS_HZ = 1.0                # DC drift removal cutoff (Hz)

# Frequency Bands (Hz), lower bound inclusive, upper bound exclusive
FREQ_BANDS: Dict[str, Tuple[float, float]] = {
    "delta": (1, 4),
    "theta": (4, 8),
    "alpha": (8, 13),
    "beta": (13, 30),
    "gamma": (30, 44),
}

BAND_NAMES = tuple(FREQ_BANDS.keys())

# Gain applied to each band to counteract the 1/f slope of the EEG spectrum
SLOPE_CORRECTION: Dict[str, float] = {
    "delta": 1.0,
    "theta": 1.5,
    "alpha": 2.0,
    "beta": 3.0,
    "gamma": 4.0,
}

# ============================================================================
# SMOOTHING
# ============================================================================

SMOOTHING_FACTOR = 0.85           # EMA factor (higher = slower, smoother)
HISTORY_LENGTH = FFT_SIZE         # Band history kept for display
MIN_TOTAL_POWER = 1e-10           # Below this the band update is skipped

# ============================================================================
# FLOW STATE DETECTION
# ============================================================================

SUSTAINED_MS = 5000               # Conditions must hold this long (ms)
VARIANCE_THRESHOLD = 0.15         # Maximum pooled alpha/beta variance
NOISE_THRESHOLD = 0.3             # Maximum motion + gamma noise level
BETA_ALPHA_RATIO_THRESHOLD = 1.0  # Beta/alpha must stay below this
VARIANCE_WINDOW = 30              # Trailing values per band (~1 s at 30 fps)
NEGLIGIBLE_ALPHA = 0.01           # Alpha below this forces the sentinel ratio
SENTINEL_RATIO = 10.0

# Signal quality gate
MIN_SIGNAL_POWER = 0.05
MIN_VARIANCE = 0.001
MIN_ALPHA = 0.02
MIN_ELECTRODE_QUALITY = 0.5

# Electrode contact (horseshoe) codes -> quality weight
HORSESHOE_WEIGHTS: Dict[int, float] = {
    1: 1.0,   # good
    2: 0.5,   # medium
    3: 0.0,   # poor
    4: 0.0,   # off
}
TOUCHING_QUALITY = 0.25           # Aggregated quality above this counts as worn

MOTION_SCALE = 30.0               # Accelerometer |x|+|y|+|z| normalization divisor

# UI threshold mapping
DEFAULT_COHERENCE_THRESHOLD = 0.7

# ============================================================================
# COHERENCE SCORING
# ============================================================================

COHERENCE_NO_SIGNAL = 0.1
COHERENCE_POOR_CONTACT = 0.15
COHERENCE_NO_ALPHA = 0.2
COHERENCE_FLOW_ZONE = 0.7
COHERENCE_STABILIZING_ZONE = 0.4
COHERENCE_HISTORY_LENGTH = 300    # ~10 s of ticks at TICK_HZ

# ============================================================================
# RUNTIME
# ============================================================================

STALE_DATA_MS = 2000              # No data for this long means disconnected
TICK_HZ = 30                      # Host loop rate for the CLI
STATUS_INTERVAL_SEC = 2.0

# Communication Configuration
UDP_HOST = "127.0.0.1"
UDP_PORT = 5005
