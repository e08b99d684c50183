"""Configuration API endpoints"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from services.config_manager import EDITABLE_SECTIONS, ConfigManager
from services.image_ops import MAX_ICO_SIZE

logger = logging.getLogger(__name__)

router = APIRouter()


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    limits: dict | None = None
    merge: dict | None = None
    icon: dict | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    limits: dict
    merge: dict
    icon: dict
    server: dict


LABEL_KEYS = ("before", "after")


def _check_labels(value: Any):
    if not isinstance(value, dict) or not value:
        raise HTTPException(status_code=400, detail="Setting merge.labels must be an object")
    for key, text in value.items():
        if key not in LABEL_KEYS:
            raise HTTPException(status_code=400, detail=f"Unknown setting: merge.labels.{key}")
        if not isinstance(text, str):
            raise HTTPException(status_code=400, detail=f"Setting merge.labels.{key} must be a string")


def _check_settings(section: str, values: dict[str, Any], defaults: dict[str, Any]):
    for key, value in values.items():
        if key not in defaults:
            raise HTTPException(status_code=400, detail=f"Unknown setting: {section}.{key}")
        if (section, key) == ("merge", "labels"):
            _check_labels(value)
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise HTTPException(
                status_code=400,
                detail=f"Setting {section}.{key} must be a positive integer",
            )
        if (section, key) == ("icon", "size") and value > MAX_ICO_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"Setting icon.size must be at most {MAX_ICO_SIZE}",
            )


@router.get("", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current configuration"""
    config = ConfigManager.get_instance().get_config()
    return ConfigResponse(**{key: config[key] for key in ConfigResponse.model_fields})


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration"""
    config_manager = ConfigManager.get_instance()
    current_config = config_manager.get_config()

    # Update only provided fields
    update = {}
    for section in EDITABLE_SECTIONS:
        values = getattr(request, section)
        if values:
            _check_settings(section, values, current_config[section])
            update[section] = values

    if not update:
        raise HTTPException(status_code=400, detail="No settings provided")

    try:
        config_manager.save_config(update)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    logger.info("Configuration updated: %s", ", ".join(sorted(update)))
    return {"status": "success", "message": "Configuration updated"}
