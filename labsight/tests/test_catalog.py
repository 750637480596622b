"""
Tests for the equipment catalog.
"""

import json

import pytest

from ..catalog import EquipmentCatalog, EquipmentEntry, LAB_EQUIPMENT, create_lab_catalog
from ..recognition import LAB_KEYWORDS


class TestEquipmentEntry:
    """Tests for EquipmentEntry."""

    def test_from_dict_camel_case(self, small_catalog):
        """camelCase keys from the browser catalog are accepted."""
        entry = small_catalog.get("beaker")

        assert entry.name == "Beaker"
        assert entry.safety_warnings == ("Glass can break",)
        assert entry.usage == ("Mixing liquids",)
        assert entry.steps == ("Inspect for cracks", "Place on a flat surface")

    def test_from_dict_snake_case(self):
        """snake_case keys work too."""
        entry = EquipmentEntry.from_dict("tripod", {
            "name": "Tripod",
            "description": "Three-legged stand.",
            "safety_warnings": ["Hot after use"],
            "aliases": ["stand"],
        })

        assert entry.safety_warnings == ("Hot after use",)
        assert entry.aliases == ("stand",)
        assert entry.steps == ()

    def test_from_dict_requires_name_and_description(self):
        """Entries without text are rejected."""
        with pytest.raises(ValueError):
            EquipmentEntry.from_dict("beaker", {"name": "Beaker"})
        with pytest.raises(ValueError):
            EquipmentEntry.from_dict("beaker", {"description": "Glass."})

    def test_from_dict_rejects_bare_string_list(self):
        """A single string is not a list of warnings."""
        with pytest.raises(ValueError):
            EquipmentEntry.from_dict("beaker", {
                "name": "Beaker",
                "description": "Glass.",
                "safetyWarnings": "Glass can break",
            })

    def test_summary_text(self, small_catalog):
        """Summary names the equipment and describes it."""
        entry = small_catalog.get("flask")
        assert entry.summary_text() == "Detected: Flask. A conical glass flask."

    def test_guidance_script_without_extras(self, small_catalog):
        """Entries without warnings or steps speak only the description."""
        assert small_catalog.get("flask").guidance_script() == [
            "Flask. A conical glass flask.",
        ]


class TestEquipmentCatalog:
    """Tests for EquipmentCatalog."""

    def test_identities_keep_order(self, small_catalog):
        """Identities follow the source order."""
        assert small_catalog.identities == ("beaker", "flask")
        assert len(small_catalog) == 2
        assert [e.identity for e in small_catalog] == ["beaker", "flask"]

    def test_lookup(self, small_catalog):
        """get and membership work by identity."""
        assert "beaker" in small_catalog
        assert "centrifuge" not in small_catalog
        assert small_catalog.get("centrifuge") is None

    def test_duplicate_identity_rejected(self):
        """Identities are unique."""
        entry = EquipmentEntry(identity="beaker", name="Beaker", description="Glass.")
        with pytest.raises(ValueError):
            EquipmentCatalog(entries=(entry, entry))

    def test_load_json(self, tmp_path):
        """Catalogs load from a JSON object file."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "centrifuge": {"name": "Centrifuge", "description": "Spins samples."},
        }))

        catalog = EquipmentCatalog.load_json(path)

        assert catalog.identities == ("centrifuge",)

    def test_load_json_rejects_list(self, tmp_path):
        """The top level must be an object."""
        path = tmp_path / "catalog.json"
        path.write_text("[]")

        with pytest.raises(ValueError):
            EquipmentCatalog.load_json(path)


class TestLabCatalog:
    """Tests for the built-in laboratory catalog."""

    def test_contents(self, lab_catalog):
        """The built-in catalog covers the common bench equipment."""
        assert len(lab_catalog) == len(LAB_EQUIPMENT) == 10
        assert lab_catalog.identities[0] == "beaker"
        for identity in ["flask", "test tube", "microscope", "bunsen burner", "wire gauze"]:
            assert identity in lab_catalog

    def test_every_entry_has_guidance(self, lab_catalog):
        """Every entry has warnings and steps to speak."""
        for entry in lab_catalog:
            assert entry.safety_warnings
            assert entry.steps
            assert entry.guidance_script()[0].startswith(entry.name)

    def test_keywords_refer_to_catalog(self, lab_catalog):
        """Every keyword table entry names a catalog identity."""
        for identity in LAB_KEYWORDS:
            assert identity in lab_catalog

    def test_fresh_catalog_each_call(self):
        """create_lab_catalog builds an equal catalog every time."""
        assert create_lab_catalog() == create_lab_catalog()
