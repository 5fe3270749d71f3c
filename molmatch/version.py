# molmatch/version.py
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("molmatch")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
