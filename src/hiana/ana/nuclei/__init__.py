"""Light nuclei analysis tasks."""

from .flow import *
