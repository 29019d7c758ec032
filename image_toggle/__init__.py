# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Color/grayscale image toggle service.

Converts a stream of pixel buffers to color ("bgr8") or grayscale ("mono8")
according to a mode that can be switched at runtime over a control channel.
"""

__version__ = "1.0.0"
