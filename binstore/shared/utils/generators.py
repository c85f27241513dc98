"""CUID2 generation for identifier leaves and upload session ids."""

from cuid2 import Cuid

# Lowercase [a-z0-9], safe as a single path segment on every filesystem.
ID_LENGTH = 24

_generator = Cuid(length=ID_LENGTH)


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string of ID_LENGTH characters.
    """
    return _generator.generate()
