"""RegIntel - regulatory intelligence CRM."""

__version__ = "1.0.0"

from regintel import models  # noqa: E402,F401
