# -*- coding: utf-8 -*-
"""Health Panda client: session handling and API access for the Health Panda backend."""

__version__ = "0.1.0"
