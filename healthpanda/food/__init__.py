# -*- coding: utf-8 -*-
"""Food domain (scanner, nutrition lookup, daily totals)."""
