from .representation import (
    BinaryRepresentation,
    CustomRepresentation,
    PermutationRepresentation,
    RealRepresentation,
    Representation,
    make_representation,
    normalize_encoding,
)

__all__ = [
    "Representation",
    "BinaryRepresentation",
    "RealRepresentation",
    "PermutationRepresentation",
    "CustomRepresentation",
    "make_representation",
    "normalize_encoding",
]
