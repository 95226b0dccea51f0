"""Display formatting configuration."""

from dataclasses import dataclass
from typing import Mapping, Optional

from dataclasses_json import dataclass_json, LetterCase

from .exceptions import ValidationError


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class FormatConfiguration:
    """How token amounts are rendered as text.

    The defaults render amounts like `USDC 11,111.00`.
    Each token can override individual settings through its
    :py:attr:`tokenamount.token.Token.format_options`.
    """

    #: Digits after the decimal point
    fraction_digits: int = 2

    #: Use comma as the thousands separator
    grouping: bool = True

    #: Shown when a token has no format symbol, symbol or name
    placeholder_symbol: str = "?"

    def __post_init__(self):
        if isinstance(self.fraction_digits, bool) or not isinstance(self.fraction_digits, int) or self.fraction_digits < 0:
            raise ValidationError(f"fraction_digits must be a non-negative integer, got {self.fraction_digits!r}")
        if not isinstance(self.grouping, bool):
            raise ValidationError(f"grouping must be a boolean, got {self.grouping!r}")
        if not isinstance(self.placeholder_symbol, str):
            raise ValidationError(f"placeholder_symbol must be a string, got {self.placeholder_symbol!r}")

    def with_options(self, options: Optional[Mapping]) -> "FormatConfiguration":
        """Apply per-token overrides.

        :param options:
            Partial mapping of settings, keys in camelCase as they appear in JSON
            or in snake_case.

        :raise ValidationError:
            On unknown settings
        """
        if not options:
            return self

        values = self.to_dict()
        for key, value in options.items():
            camel_key = LetterCase.CAMEL(key)
            if camel_key not in values:
                raise ValidationError(f"Unknown format option {key!r}, known options are {sorted(values)}")
            values[camel_key] = value

        return FormatConfiguration.from_dict(values)


#: Format settings used when a token does not override them
DEFAULT_FORMAT_CONFIGURATION = FormatConfiguration()
