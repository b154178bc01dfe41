# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Barco projector.
"""
from .app import create_proj_api
from .api import get_projector_client, get_projector_config
