"""
Example 03: Several Senders

This example demonstrates one receiver with conversions from two senders,
directives targeting a specific sender, and nested fields converted through
other generated conversions.
"""

from dataclasses import dataclass
from typing import Annotated

from struct_auto_from import auto_from, auto_from_attr


@dataclass
class Model1:
    id: int
    name: str
    attrs: list[str]


@dataclass
class Model1a:
    id: int
    nom: str
    attrs: list[str]
    m: Model1


@auto_from(Model1)
@dataclass
class Model2a:
    id: int
    name: str
    attrs: list[str]
    meta: Annotated[dict[str, str], auto_from_attr("default_value = {}")]


@auto_from(Model1a, Model2a)
@dataclass
class Model3a:
    id: Annotated[int, auto_from_attr("default_value = 0")]
    name: Annotated[str, auto_from_attr('from_field = "nom"')]
    attrs: list[str]
    # Model1a has no metadata: default. Model2a calls it meta.
    metadata: Annotated[
        dict[str, str],
        auto_from_attr("default_value = {}"),
        auto_from_attr('from_field = "meta", from_struct = Model2a'),
    ]
    # Model1a.m is converted through Model2a's own conversion
    m: Annotated[
        Model2a,
        auto_from_attr("from_struct = Model2a, default_value = Model2a(0, '', [], {})"),
    ]


def main():
    print("=== Model3a from Model1a ===\n")

    model1a = Model1a(
        id=1,
        nom="Xyz",
        attrs=["a", "b"],
        m=Model1(id=99, name="Mary", attrs=["x", "y", "z"]),
    )
    model3a = Model3a.convert_from(model1a)
    print(f"model1a={model1a}")
    print(f"model3a={model3a}\n")

    print("=== Model3a from Model2a ===\n")

    model2a = Model2a(id=1, name="Xyz", attrs=["a", "b"], meta={"abc": "111", "def": "222"})
    model3a = Model3a.convert_from(model2a)
    print(f"model2a={model2a}")
    print(f"model3a={model3a}\n")

    print("Generated conversions:")
    for sender, plan in Model3a.__auto_from_plans__.items():
        print(f"  {sender}: reads {plan.reads}, defaults {plan.defaults}")


if __name__ == "__main__":
    main()
