# -*- coding: utf-8 -*-
"""Profile domain (onboarding data, body metrics)."""
