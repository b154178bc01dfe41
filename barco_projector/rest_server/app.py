#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Barco projector.

The projector address and client settings are given explicitly, as a
BarcoProjectorClientConfig passed to create_proj_api().
"""

from __future__ import annotations

from fastapi import FastAPI

import time

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from .. import (
    __version__ as pkg_version,
    BarcoProjectorClient,
    BarcoProjectorClientConfig,
  )

from .api import router as api_router

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """

    logger.info(f"Projector REST server {pkg_version} starting up--initializing...")
    barco_config: BarcoProjectorClientConfig = app.state.barco_config
    app.state.launch_time = time.monotonic()
    barco_client = BarcoProjectorClient(config=barco_config)
    app.state.barco_client = barco_client
    try:
        await barco_client.connect()
    except Exception as e:
        # keep serving; the status endpoint reports the disconnected state
        logger.error(f"Unable to connect to projector at startup: {e}")
        barco_client.schedule_reconnect()
    try:
        logger.info(f"Serving API for projector at {barco_client}...")
        yield
    finally:
        logger.info("Projector REST server shutting down--cleaning up...")
        await barco_client.aclose()

def create_proj_api(config: BarcoProjectorClientConfig) -> FastAPI:
    """Creates the REST app for the projector described by config.

    The client is created and connected when the app starts up, and closed
    when it shuts down.
    """
    proj_api = FastAPI(lifespan=fastapi_lifetime)
    proj_api.state.barco_config = config
    proj_api.include_router(api_router)
    return proj_api
