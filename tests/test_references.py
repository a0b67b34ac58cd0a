import pytest

from tripbook.services.references import RandomReferenceGenerator


def test_reference_format():
    generator = RandomReferenceGenerator(exists=lambda ref: False)
    reference = generator.generate("FL")
    assert reference.startswith("FL")
    assert len(reference) == 11
    assert reference[2:].isalnum() and reference[2:].upper() == reference[2:]


def test_collisions_are_redrawn():
    seen = []

    def exists(ref):
        seen.append(ref)
        return len(seen) < 3

    reference = RandomReferenceGenerator(exists=exists).generate("CR")
    assert reference == seen[-1]
    assert len(seen) == 3


def test_gives_up_after_max_attempts():
    generator = RandomReferenceGenerator(exists=lambda ref: True, max_attempts=4)
    with pytest.raises(RuntimeError):
        generator.generate("FL")
