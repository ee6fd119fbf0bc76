"""
Example 02: Renamed Fields and Defaults

This example demonstrates field directives: reading a field under another
name and populating fields from default expressions instead of the sender.
"""

from dataclasses import dataclass
from typing import Annotated

from struct_auto_from import auto_from, auto_from_attr


@dataclass
class UserModel:
    """Storage-side user"""
    id: int
    nom: str
    email: str


@auto_from(UserModel)
@dataclass
class UserType:
    """API-side user"""
    id: Annotated[int, auto_from_attr("default_value = 42")]
    name: Annotated[str, auto_from_attr('from_field = "nom"')]
    metadata: Annotated[dict[str, str], auto_from_attr("default_value = {}")]
    email: str


def main():
    user_model = UserModel(id=1234, nom="GvR", email="me@example.com")

    print("=== Renamed Fields and Defaults ===\n")

    user_type = UserType.convert_from(user_model)
    print(user_type)

    assert user_type.id == 42
    assert user_type.name == "GvR"
    assert user_type.email == "me@example.com"
    assert user_type.metadata == {}


if __name__ == "__main__":
    main()
