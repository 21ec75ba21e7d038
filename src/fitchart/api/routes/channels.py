"""Channel table routes."""
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from fitchart.analysis.channels import CHANNELS, ChannelConfig, UnknownChannelError, get_channel

router = APIRouter()


class ChannelInfo(BaseModel):
    key: str
    title: str
    unit: str
    color: str
    invert_y: bool
    fields: List[str]


def _info(config: ChannelConfig) -> ChannelInfo:
    return ChannelInfo(
        key=config.key,
        title=config.title,
        unit=config.unit,
        color=config.color,
        invert_y=config.invert_y,
        fields=list(config.fields),
    )


@router.get("/", response_model=List[ChannelInfo])
def list_channels():
    """Every recognised channel, in display order."""
    return [_info(c) for c in CHANNELS.values()]


@router.get("/{key}", response_model=ChannelInfo)
def get_channel_info(key: str):
    try:
        return _info(get_channel(key))
    except UnknownChannelError:
        raise HTTPException(status_code=404, detail=f"Unknown channel: {key}")
