__version__ = version = '0.3.2'
__version_tuple__ = version_tuple = (0, 3, 2)
