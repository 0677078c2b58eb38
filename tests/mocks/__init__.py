from tests.mocks.device_mock import MockDevice, default_resources

__all__ = [
    'MockDevice',
    'default_resources',
]
