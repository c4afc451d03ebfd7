from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("route-watch")
except PackageNotFoundError:        # running from a checkout
    __version__ = "0.0.0+dev"
