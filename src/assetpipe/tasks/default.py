from ..core import composite


default = composite("default", ["javascript", "fonts", "styles"])
