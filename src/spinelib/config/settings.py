"""
Library Configuration Settings

All configuration constants for the skeleton runtime.
Modify these values to change runtime behavior.
"""

from pathlib import Path

# ============================================================================
# Project Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# ============================================================================
# Document Defaults
# ============================================================================

DEFAULT_SKIN_NAME = "default"  # Skin consulted when the bound skin lacks an attachment
DEFAULT_SLOT_COLOR = (1.0, 1.0, 1.0, 1.0)  # RGBA, used when a slot has no color
DEFAULT_ATTACHMENT_TYPE = "region"  # Attachment type when "type" is omitted

# ============================================================================
# Interpolation Settings
# ============================================================================

# Bezier curves are solved for the curve parameter by bisection
BEZIER_MAX_ITERATIONS = 30  # 2^-30 is far below float32 resolution
BEZIER_TOLERANCE = 1e-6     # Stop early once |x(s) - fraction| is below this

# Bone timeline values replace the bind pose (False) or are applied on top of
# it, rotation/translation added and scale multiplied (True)
ADDITIVE_BONE_TIMELINES = False
