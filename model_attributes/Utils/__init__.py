from .Logger import LaravelStyleLogger, get_logger

__all__ = ['LaravelStyleLogger', 'get_logger']
