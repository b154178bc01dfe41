# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
REST API routes for the Barco projector REST server.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from .logger import logger
from ..internal_types import *
from ..exceptions import (
    BarcoProjectorError,
    NotConnectedError,
    ResponseTimeoutError,
  )
from ..client import BarcoProjectorClient, BarcoProjectorClientConfig

class CommandRequest(BaseModel):
    command: str
    timeout_secs: Optional[float] = None

class CommandResponse(BaseModel):
    command: str
    response: str

class StatusResponse(BaseModel):
    host: Optional[str]
    port: Optional[int]
    state: str
    connected: bool

def get_projector_client(request: Request) -> BarcoProjectorClient:
    return request.app.state.barco_client

def get_projector_config(request: Request) -> BarcoProjectorClientConfig:
    return request.app.state.barco_config

router = APIRouter()

@router.get("/status", response_model=StatusResponse)
async def get_status(
        client: BarcoProjectorClient = Depends(get_projector_client),
      ) -> StatusResponse:
    """Returns the connection status of the projector client."""
    return StatusResponse(
        host=client.host,
        port=client.port,
        state=client.state.value,
        connected=client.is_connected,
      )

@router.get("/config")
async def get_config(
        config: BarcoProjectorClientConfig = Depends(get_projector_config),
      ) -> Dict[str, Any]:
    """Returns the effective client configuration."""
    return config.to_jsonable()

@router.post("/command", response_model=CommandResponse)
async def post_command(
        body: CommandRequest,
        client: BarcoProjectorClient = Depends(get_projector_client),
      ) -> CommandResponse:
    """Sends a raw command to the projector and returns its response."""
    try:
        response = await client.send_command(body.command, timeout_secs=body.timeout_secs)
    except NotConnectedError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except ResponseTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e)) from e
    except BarcoProjectorError as e:
        logger.warning(f"Command {body.command!r} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    return CommandResponse(command=body.command, response=response)
