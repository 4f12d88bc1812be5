"""Pydantic model for persisted modalkit settings."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .values import LOG_LEVELS, WEB_DEFAULTS


class Settings(BaseModel):
    """Settings persisted to ``settings.json``.

    Parameters
    ----------
    host: Interface the web bridge binds to.
    port: TCP port of the web bridge.
    log_level: Name of a :mod:`logging` level, case-insensitive.
    ws_heartbeat_s: Interval between WebSocket pings in seconds.
    ws_queue_size: Pending state snapshots kept per WebSocket client. Older
        snapshots are dropped first when a client falls behind.
    """

    host: str = Field(default=str(WEB_DEFAULTS["host"]))
    port: int = Field(default=int(WEB_DEFAULTS["port"]))
    log_level: str = Field(default="INFO")
    ws_heartbeat_s: float = Field(default=float(WEB_DEFAULTS["ws_heartbeat_s"]))
    ws_queue_size: int = Field(default=int(WEB_DEFAULTS["ws_queue_size"]))

    @field_validator("port")
    @classmethod
    def _chk_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("port must be within 1..65535")
        return v

    @field_validator("log_level")
    @classmethod
    def _chk_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError("invalid log_level: must be one of " + ", ".join(LOG_LEVELS))
        return v

    @field_validator("ws_heartbeat_s")
    @classmethod
    def _chk_heartbeat(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("ws_heartbeat_s must be > 0 (seconds)")
        return v

    @field_validator("ws_queue_size")
    @classmethod
    def _chk_queue(cls, v: int) -> int:
        if v < 1:
            raise ValueError("ws_queue_size must be >= 1")
        return v
