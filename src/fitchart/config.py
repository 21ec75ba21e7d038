from typing import Optional

from pydantic_settings import BaseSettings

from fitchart.analysis.smoothing import BoundaryPolicy


class Settings(BaseSettings):
    sigma_threshold: float = 2.0
    filter_outliers: bool = True
    smoothing_window: int = 5
    smoothing_boundary: BoundaryPolicy = BoundaryPolicy.SHRINK_WINDOW
    hit_threshold_px: float = 30.0
    curve_tension: float = 0.4
    chart_width: int = 300
    chart_height: int = 200
    device_pixel_ratio: float = 1.0
    display_timezone: Optional[str] = None  # IANA name; None = host local zone

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "FITCHART_"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
