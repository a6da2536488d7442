# -*- coding: utf-8 -*-
"""HTTP client for the Health Panda backend."""
