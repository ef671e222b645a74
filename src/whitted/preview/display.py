"""Conversion of traced colors to displayable values.

The tracer produces unclamped linear colors (a bright highlight plus a
reflection can exceed 1.0). Clamping and scaling to 8-bit channels happen
here, at the output boundary.

Example:
    >>> import numpy as np
    >>> from whitted.preview.display import colors_to_uint8
    >>> colors_to_uint8(np.array([[1.7, 0.5, -0.2]], dtype=np.float32))
    array([[255, 128,   0]], dtype=uint8)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def colors_to_uint8(colors: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Clamp to [0, 1], scale by 255 and round colors to 8-bit channels.

    Args:
        colors: Linear color array (last axis is RGB).

    Returns:
        Array of the same shape with dtype uint8.
    """
    clamped = np.clip(colors, 0.0, 1.0)
    return np.round(clamped * 255.0).astype(np.uint8)
