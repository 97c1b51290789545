"""Attribute bag exchanged between the lifecycle runtime and the Web ACL service."""
import copy
from typing import Any

ATTRIBUTE_KEYS = ("name", "metric_name", "default_action", "rules")


class ResourceData:
    """
    Mutable view of one Web ACL resource.

    Holds the desired attributes plus the last view synced from AWS, so
    the service can tell which attributes changed. ``set`` writes to both,
    ``apply_config`` replaces only the desired attributes.
    """

    def __init__(
        self,
        attributes: dict[str, Any] | None = None,
        id: str | None = None,
        synced: dict[str, Any] | None = None,
    ):
        self._id = id or ""
        self._attributes: dict[str, Any] = copy.deepcopy(attributes or {})
        self._synced: dict[str, Any] = copy.deepcopy(synced or {})

    @property
    def id(self) -> str:
        """Remote identity, empty when the resource is absent."""
        return self._id

    def set_id(self, value: str) -> None:
        """Set (or clear with an empty string) the remote identity."""
        self._id = value

    def is_absent(self) -> bool:
        return not self._id

    def get(self, key: str, default: Any = None) -> Any:
        """Get a desired attribute."""
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Record an attribute read from AWS."""
        self._attributes[key] = copy.deepcopy(value)
        self._synced[key] = copy.deepcopy(value)

    def get_synced(self, key: str, default: Any = None) -> Any:
        """Get an attribute as last read from AWS."""
        return self._synced.get(key, default)

    def has_change(self, key: str) -> bool:
        """Check if a desired attribute differs from the last synced view."""
        return self._attributes.get(key) != self._synced.get(key)

    def apply_config(self, attributes: dict[str, Any]) -> None:
        """Replace the desired attributes, keeping the synced view."""
        self._attributes = copy.deepcopy(attributes)

    def to_dict(self) -> dict[str, Any]:
        """Return the identity and attributes as a plain dict."""
        return {"id": self._id, **{k: copy.deepcopy(self._attributes.get(k)) for k in ATTRIBUTE_KEYS}}

    def __repr__(self) -> str:
        return f"ResourceData(id={self._id!r}, name={self._attributes.get('name')!r})"
