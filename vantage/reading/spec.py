"""Read specifications passed from a store to its readers.

A ReadSpec describes which slice of an entity's record stream a reader must
return. It is the only data contract between the store and any reader
implementation, so every reader must honour the same ordering and bound
semantics:

- ``First``, ``After`` and ``Before`` return records in ascending version
  order.
- ``Last`` returns the most recent ``count`` records in descending version
  order.
- ``until`` excludes records whose version is greater than or equal to the
  bound.
- ``through`` excludes records whose version is greater than the bound.
- ``count`` limits the result after ordering and filtering.
"""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    Field,
    ModelWrapValidatorHandler,
    NonNegativeInt,
    ValidationError,
    model_validator,
)
from typing_extensions import Self

from ..exceptions import ConfigurationError, UnknownPositionError


class First(BaseModel):
    """Read from the first record of the stream onward."""

    model_config = {"frozen": True}

    kind: Literal["first"] = "first"


class Last(BaseModel):
    """Read the most recent records of the stream, newest first."""

    model_config = {"frozen": True}

    kind: Literal["last"] = "last"


class After(BaseModel):
    """Read records whose version is strictly greater than ``version``."""

    model_config = {"frozen": True}

    kind: Literal["after"] = "after"
    version: Any


class Before(BaseModel):
    """Read records whose version is strictly less than ``version``."""

    model_config = {"frozen": True}

    kind: Literal["before"] = "before"
    version: Any


Position = Annotated[First | Last | After | Before, Field(discriminator="kind")]


def _is_invalid_position(error: Any) -> bool:
    # A position that is absent altogether is a missing field, not an unknown position.
    return error["loc"][:1] == ("position",) and not (
        error["loc"] == ("position",) and error["type"] == "missing"
    )


class ReadSpec(BaseModel):
    """Immutable description of a read request for a single entity.

    Attributes:
        entity_id: Identity of the entity whose records are read.
        position: Where in the stream to read from.
        count: Maximum number of records to return, ``None`` for unbounded.
        until: Optional exclusive upper bound on record versions.
        through: Optional inclusive upper bound on record versions.

    ``until`` and ``through`` are independent filters. When both are given a
    record must satisfy both of them.

    Examples:
        Read the whole stream of an account:

        >>> ReadSpec(entity_id=account_id, position=First(), count=None)

        Read the newest snapshot strictly before a version:

        >>> ReadSpec(entity_id=account_id, position=Before(version=42), count=1)
    """

    model_config = {"frozen": True}

    entity_id: Any = Field(description="Identity of the entity being read")
    position: Position = Field(description="Where in the stream to start reading")
    count: NonNegativeInt | None = Field(
        description="Maximum number of records to return, None for unbounded"
    )
    until: Any | None = Field(
        default=None,
        description="Exclude records with a version greater than or equal to this bound",
    )
    through: Any | None = Field(
        default=None,
        description="Exclude records with a version greater than this bound",
    )

    @model_validator(mode="wrap")
    @classmethod
    def _reject_as_configuration_error(
        cls, data: Any, handler: ModelWrapValidatorHandler[Self]
    ) -> Self:
        """Report invalid read requests as configuration errors.

        An unrecognised position raises ``UnknownPositionError``; any other
        missing or invalid field raises ``ConfigurationError``.
        """
        try:
            return handler(data)
        except ValidationError as err:
            for error in err.errors():
                if _is_invalid_position(error):
                    position = data.get("position") if isinstance(data, dict) else data
                    raise UnknownPositionError(position) from err
            raise ConfigurationError(f"Invalid read specification: {err}") from err

    @property
    def is_unbounded(self) -> bool:
        return self.count is None
