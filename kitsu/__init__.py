# kitsu is a namespace package shared by several distributions
from pkgutil import extend_path
__path__ = extend_path(__path__, __name__)
del extend_path
