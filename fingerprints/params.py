"""
Parameter rules and output-parameter post-processing
"""
from dataclasses import dataclass
from typing import Dict, Optional, Set
import re

from config import settings
from .exceptions import InvalidFingerprintDataError

# Any {placeholder} left over after known substitutions
_PLACEHOLDER_RE = re.compile(r"\{[^}]+\}")


@dataclass(frozen=True)
class ParameterRule:
    """
    Maps a capture group of a fingerprint pattern to an output field

    Position 0 is the whole match; 1 and above are capture groups.
    """
    position: int
    name: str
    default_value: Optional[str] = None

    def __post_init__(self):
        if self.position < 0:
            raise InvalidFingerprintDataError(
                f"Parameter '{self.name}' has negative position {self.position}"
            )

    @classmethod
    def with_value(cls, position: int, name: str, value: str) -> "ParameterRule":
        """Create a rule carrying a default value"""
        return cls(position=position, name=name, default_value=value)


class ParameterInterpolator:
    """
    Post-processes extracted parameter maps

    Expands {name} placeholders against a parameter map and removes
    temporary parameters. A parameter is temporary when it was registered
    with mark_temporary() or its name starts with the temporary prefix.

    Example:
        interpolator = ParameterInterpolator()
        interpolator.mark_temporary("_tmp.os")

        interpolator.interpolate("cpe:/a:{vendor}:{product}", params)
        interpolator.process_output_parameters(params)
    """

    def __init__(self, temporary_prefix: Optional[str] = None):
        self.temporary_prefix = (
            temporary_prefix if temporary_prefix is not None else settings.temporary_param_prefix
        )
        self._temporary: Set[str] = set()

    @property
    def temporary_names(self) -> Set[str]:
        """Names explicitly registered as temporary"""
        return set(self._temporary)

    def mark_temporary(self, name: str):
        """Register a parameter name as internal-only"""
        self._temporary.add(name)

    def is_temporary(self, name: str) -> bool:
        if name in self._temporary:
            return True
        return bool(self.temporary_prefix) and name.startswith(self.temporary_prefix)

    def interpolate(self, template: str, parameters: Dict[str, str]) -> str:
        """
        Expand {name} placeholders in a template

        Known names are substituted first; any placeholder still present
        afterwards is replaced with an empty string.

        Args:
            template: Template text, e.g. "cpe:/a:{vendor}:{product}"
            parameters: Parameter values

        Returns:
            Expanded text
        """
        result = template
        for name, value in parameters.items():
            result = result.replace("{" + name + "}", value)

        return _PLACEHOLDER_RE.sub("", result)

    def filter_temporary(self, parameters: Dict[str, str]) -> Dict[str, str]:
        """Remove temporary parameters in place"""
        for name in [n for n in parameters if self.is_temporary(n)]:
            del parameters[name]
        return parameters

    def process_output_parameters(self, parameters: Dict[str, str]) -> Dict[str, str]:
        """
        Shape extracted parameters for output

        This is the single hook the Matcher calls between raw extraction
        and result construction.
        """
        return self.filter_temporary(parameters)
