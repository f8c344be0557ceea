"""modelfit: will this model run on this machine?"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("modelfit")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
