"""Domain entities for GitHub repositories."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Repository:
    """Immutable repository entity as returned by the search endpoint."""

    id: int
    name: str
    full_name: str
    description: Optional[str]
    url: str
    owner: str

    @classmethod
    def from_api_item(cls, item: Dict[str, Any]) -> "Repository":
        """
        Build a repository from one item of a search response.

        Args:
            item: Repository object from the ``items`` array

        Returns:
            Repository entity

        Raises:
            KeyError: If a required field is missing
            TypeError: If a field has the wrong type
            ValueError: If ``full_name`` is empty
        """
        full_name = item["full_name"]
        if not isinstance(full_name, str) or not full_name:
            raise ValueError(f"Invalid full_name: {full_name!r}")

        repo_id = item["id"]
        # bool is an int subclass
        if isinstance(repo_id, bool) or not isinstance(repo_id, int):
            raise TypeError(f"id must be an integer, got {repo_id!r}")

        description = item.get("description")
        if description is not None and not isinstance(description, str):
            raise TypeError(f"description must be a string, got {description!r}")

        fields = {
            "name": item["name"],
            "html_url": item["html_url"],
            "owner.login": item["owner"]["login"],
        }
        for key, value in fields.items():
            if not isinstance(value, str):
                raise TypeError(f"{key} must be a string, got {value!r}")

        return cls(
            id=repo_id,
            name=fields["name"],
            full_name=full_name,
            description=description,
            url=fields["html_url"],
            owner=fields["owner.login"],
        )
