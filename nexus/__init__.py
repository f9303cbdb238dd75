# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Percipia Nexus connect-policy resolution for telephony clients."""

__version__ = "0.1.0"
