# -*- coding: utf-8 -*-
"""Auth domain (credentials, session state)."""
