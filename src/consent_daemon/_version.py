import importlib.metadata

try:
    VERSION = importlib.metadata.version("consent2api")
except importlib.metadata.PackageNotFoundError:
    # Not installed (e.g. running tests straight from the source tree)
    VERSION = "0.0.0-dev"
