# sparse_fiber/constants.py
"""
Compressed Sparse Fiber Constants

This module defines constants used throughout the sparse_fiber package:

STORAGE
- DEFAULT_INDEX_DTYPE: numpy dtype used when exporting fptr/fids as arrays
- POINTER_DTYPE: numpy dtype of exported pointer arrays

LOGGING
- LOG_FORMAT / LOG_DATE_FORMAT: formatter used by setup_logging()
"""
import numpy as np


# =============================================================================
# STORAGE
# =============================================================================

DEFAULT_INDEX_DTYPE = np.int64
POINTER_DTYPE = np.int64

# Minimum tensor order (a CSF with one level is a sorted vector)
MIN_DIMS = 1


# =============================================================================
# LOGGING
# =============================================================================

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
