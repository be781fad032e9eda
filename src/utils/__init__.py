"""
Utility modules for the price relay
"""
from .config_loader import RelayConfig, load_relay_config

__all__ = [
    'RelayConfig',
    'load_relay_config',
]
