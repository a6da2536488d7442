# -*- coding: utf-8 -*-
"""
Simulated vitals for the home dashboard.
"""

from .simulator import DEFAULT_VITALS, SimulatedValue, VitalSpec, VitalsSimulator, heart_rate_zone

__all__ = [
    'DEFAULT_VITALS',
    'SimulatedValue',
    'VitalSpec',
    'VitalsSimulator',
    'heart_rate_zone',
]
