import hashlib

from brainstats.data.loader import MORPHOMETRY_TABLE, CURVATURE_TABLE
from brainstats.reproducibility import get_provenance_dict, get_reference_digests
from brainstats.reproducibility.provenance import TRACKED_DEPENDENCIES


def test_provenance_keys():
    provenance = get_provenance_dict()

    assert set(provenance) == {"python_version", "dependencies", "reference_tables"}
    assert set(provenance["dependencies"]) == set(TRACKED_DEPENDENCIES)
    assert provenance["dependencies"]["numpy"] != "not installed"


def test_reference_digests():
    digests = get_reference_digests()

    assert set(digests) == {MORPHOMETRY_TABLE, CURVATURE_TABLE}
    assert all(len(d) == len(hashlib.sha256().hexdigest()) for d in digests.values())
    assert digests[MORPHOMETRY_TABLE] != digests[CURVATURE_TABLE]
