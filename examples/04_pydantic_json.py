"""
Example 04: Pydantic Models and JSON

This example demonstrates Pydantic receivers: aliased fields are constructed
through their alias, and the converted model serializes as usual.
"""

from typing import Annotated

from pydantic import BaseModel, Field

from struct_auto_from import DiagnosticError, Expr, auto_from, auto_from_attr


class UserModel(BaseModel):
    id: int
    nom: str
    email: str


@auto_from(UserModel)
class UserType(BaseModel):
    id: Annotated[int, auto_from_attr(default_value=0)]
    name: Annotated[str, Field(alias="new_name"), auto_from_attr(from_field="nom")]
    metadata: Annotated[dict[str, str], auto_from_attr(default_value=Expr("{}"))] = Field(exclude=True)
    email: str


def main():
    print("=== Pydantic Models and JSON ===\n")

    user = UserType.convert_from(UserModel(id=1, nom="Xyz", email="xyz@example.com"))
    print(f"user={user!r}")
    print(f"user to JSON: {user.model_dump_json(by_alias=True)}\n")

    print("=== Diagnostics ===\n")

    class Broken(BaseModel):
        id: Annotated[int, auto_from_attr("default_value = 0, from_field = id")]
        name: Annotated[str, auto_from_attr("frm_field = nom")]

    try:
        auto_from(UserModel, UserModel)(Broken)
    except DiagnosticError as e:
        print(e)


if __name__ == "__main__":
    main()
