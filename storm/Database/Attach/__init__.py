from .File import File, ValidationFile

__all__ = ['File', 'ValidationFile']
