"""
Example 01: Basic Conversion

This example demonstrates generating an identity conversion between two
dataclasses with the same field names.
"""

from dataclasses import dataclass

from struct_auto_from import auto_from, convert


@dataclass
class Model1:
    """Sender"""
    id: int
    name: str
    attrs: list[str]


@auto_from(Model1)
@dataclass
class Model2:
    """Receiver: every field is read from the same-named sender field"""
    id: int
    name: str
    attrs: list[str]


def main():
    model1 = Model1(id=1, name="Mary", attrs=["a", "b"])

    print("=== Basic Conversion ===\n")

    model2 = Model2.convert_from(model1)
    print(f"model1={model1}")
    print(f"model2={model2}")

    # The conversion is also registered with the generic converter
    assert convert(model1, Model2) == model2


if __name__ == "__main__":
    main()
