from .Repository import ConfigRepository, get_config, set_config, config, env
from .Nodes import Comment, Node, Scalar, Name, Raw, ArrayItem, Array, Arg, Call, Assign, Module
from .Printer import Standard
from .StormPrinter import StormPrinter
from .ConfigWriter import ConfigWriter, EnvValue

__all__ = [
    'ConfigRepository',
    'get_config',
    'set_config',
    'config',
    'env',
    'Comment',
    'Node',
    'Scalar',
    'Name',
    'Raw',
    'ArrayItem',
    'Array',
    'Arg',
    'Call',
    'Assign',
    'Module',
    'Standard',
    'StormPrinter',
    'ConfigWriter',
    'EnvValue',
]
