"""PathPattern Core - constants, exceptions and validators.

Import specific names from submodules:
    from pathpattern.core.constants import PatternFlags
    from pathpattern.core.errors import BadFormatError
    from pathpattern.core.validators import validate_pattern
"""

from pathpattern.core import constants, errors, validators

__all__ = [
    "constants",
    "errors",
    "validators",
]
