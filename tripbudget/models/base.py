"""Base model shared by all trip budget entities.

Provides a Pydantic base class with the common configuration and a
validated copy helper used by the stores when applying partial updates.
"""

from typing import Any, Dict, TypeVar

from pydantic import BaseModel, ConfigDict

ModelT = TypeVar("ModelT", bound="BaseDataModel")


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Example:
        >>> class Place(BaseDataModel):
        ...     name: str
        >>> Place(name="Lisbon").with_updates(name="Porto").name
        'Porto'
    """

    model_config = ConfigDict(
        # Decimal and date values are used throughout
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        extra="forbid",
        frozen=False,
    )

    def with_updates(self: ModelT, **updates: Any) -> ModelT:
        """Return a re-validated copy with the given fields replaced.

        Unlike ``model_copy(update=...)`` the result goes through field
        validation, so bad partial updates are rejected.

        Args:
            **updates: Field values to replace

        Returns:
            New model instance of the same type
        """
        data: Dict[str, Any] = self.model_dump()
        data.update(updates)
        return type(self).model_validate(data)
