"""
Common Pydantic schemas
Modelos comuns
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Simple message response"""
    message: str = Field(..., description="Mensagem")
    success: bool = Field(default=True)


class ErrorResponse(BaseModel):
    """Error body returned for every game error"""
    kind: str = Field(..., description="Tipo do erro")
    detail: str = Field(..., description="Mensagem para o jogador")


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    database: Optional[Dict[str, Any]] = None
    redis: Optional[Dict[str, Any]] = None
