from __future__ import annotations

# Component loggers under ``storm.*`` write to the configured log channels
from storm.Log import install_channel_bridge

install_channel_bridge()
